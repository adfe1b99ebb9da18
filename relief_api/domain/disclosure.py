# SPDX-License-Identifier: Apache-2.0

"""
Per-viewer disclosure of help request contact details.

A viewer sees the private tier of a request when they own it or hold a
volunteer response for it; everyone else sees the public tier. The relation
is recomputed from already-fetched data on every read and never stored.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set

from ..models.entities import ContactInfo, HelpRequest, VolunteerResponse
from ..models.enums import Urgency


@dataclass(frozen=True)
class Disclosure:
    """Contact tier selected for one viewer."""
    display_data: ContactInfo
    is_authorized: bool


def collect_authorized_request_ids(responses: Iterable[VolunteerResponse]) -> Set[str]:
    """
    Build the set of request IDs a viewer holds volunteer responses for.

    Built once per listing call rather than once per record. Responses of
    every status count, cancelled ones included.

    Args:
        responses: The viewer's volunteer responses

    Returns:
        Set of help request IDs
    """
    return {response.request_id for response in responses}


def is_authorized(viewer_id: Optional[str], request: HelpRequest,
                  viewer_response_ids: Optional[Set[str]] = None) -> bool:
    """
    Check whether a viewer may see the private tier of a request.

    A missing response set counts as empty, so only the owner check applies.
    """
    if viewer_id is not None and request.user_id == viewer_id:
        return True
    return bool(viewer_response_ids) and request.id in viewer_response_ids


def resolve(viewer_id: Optional[str], request: HelpRequest,
            viewer_response_ids: Optional[Set[str]] = None) -> Disclosure:
    """
    Select the contact tier a viewer is shown.

    Args:
        viewer_id: Authenticated viewer's user ID
        request: Help request holding both tiers
        viewer_response_ids: Request IDs the viewer has volunteered for

    Returns:
        Disclosure with the selected tier and the authorization flag
    """
    authorized = is_authorized(viewer_id, request, viewer_response_ids)
    display_data = request.private_data if authorized else request.public_data
    return Disclosure(display_data=display_data, is_authorized=authorized)


def _serialize(request: HelpRequest, disclosure: Disclosure) -> Dict[str, Any]:
    record = request.model_dump(mode="json", by_alias=True)
    record["displayData"] = disclosure.display_data.model_dump(mode="json", by_alias=True)
    record["isAuthorized"] = disclosure.is_authorized
    return record


def project(viewer_id: Optional[str], request: HelpRequest,
            viewer_response_ids: Optional[Set[str]] = None) -> Dict[str, Any]:
    """Serialize a request for a viewer with displayData and isAuthorized."""
    return _serialize(request, resolve(viewer_id, request, viewer_response_ids))


def project_commitment(request: HelpRequest) -> Dict[str, Any]:
    """
    Serialize a request in the viewer's own commitments list.

    The viewer created the response being listed, so the private tier is
    always disclosed.
    """
    return _serialize(request, Disclosure(display_data=request.private_data, is_authorized=True))


def sort_by_urgency(requests: Iterable[HelpRequest]) -> List[HelpRequest]:
    """
    Order requests most urgent first, newest first within an urgency.

    Args:
        requests: Help requests in any order

    Returns:
        New list ordered Critical, High, Medium, Low
    """
    return sorted(
        requests,
        key=lambda request: (Urgency(request.urgency).rank, request.created_at),
        reverse=True
    )


def project_listing(viewer_id: Optional[str], requests: Iterable[HelpRequest],
                    viewer_responses: Optional[Iterable[VolunteerResponse]] = None) -> List[Dict[str, Any]]:
    """
    Order and disclose a listing for one viewer.

    Args:
        viewer_id: Authenticated viewer's user ID
        requests: Help requests to list
        viewer_responses: The viewer's volunteer responses

    Returns:
        Serialized requests in urgency order
    """
    response_ids = collect_authorized_request_ids(viewer_responses or [])
    return [project(viewer_id, request, response_ids) for request in sort_by_urgency(requests)]
