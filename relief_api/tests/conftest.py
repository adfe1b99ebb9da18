# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from relief_api.app import create_app
from relief_api.config import Settings
from relief_api.models.entities import User, HelpRequest, VolunteerResponse, Resource, ContactInfo
from relief_api.services.auth import AuthService
from relief_api.services.mongodb import DuplicateDocumentError
from relief_api.services.redis import RedisService

TEST_JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


class InMemoryStore:
    """
    In-memory stand-in for MongoDBService.

    Entities are stored as documents and rebuilt on read, so the same
    document mapping is exercised as with MongoDB.
    """

    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.help_requests: Dict[str, dict] = {}
        self.volunteer_responses: Dict[str, dict] = {}
        self.resources: Dict[str, dict] = {}

    def _put(self, collection: Dict[str, dict], entity) -> str:
        document = entity.to_document()
        collection[str(document["_id"])] = document
        return str(document["_id"])

    def health_check(self):
        return {"status": "healthy", "database": "memory"}

    # Users

    def create_user(self, user: User) -> str:
        if any(document["email"] == user.email for document in self.users.values()):
            raise DuplicateDocumentError("Document already exists in users")
        return self._put(self.users, user)

    def find_user_by_email(self, email: str) -> Optional[User]:
        for document in self.users.values():
            if document["email"] == email.lower():
                return User.from_document(document)
        return None

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        document = self.users.get(user_id)
        return User.from_document(document) if document else None

    def find_users_by_ids(self, user_ids: Iterable[str]) -> Dict[str, User]:
        users = (self.find_user_by_id(user_id) for user_id in set(user_ids))
        return {user.id: user for user in users if user}

    # Help requests

    def create_help_request(self, help_request: HelpRequest) -> str:
        return self._put(self.help_requests, help_request)

    def find_help_request(self, request_id: str) -> Optional[HelpRequest]:
        document = self.help_requests.get(request_id)
        return HelpRequest.from_document(document) if document else None

    def list_help_requests(self, status=None, help_type=None) -> List[HelpRequest]:
        return [
            HelpRequest.from_document(document)
            for document in self.help_requests.values()
            if (not status or document["status"] == status)
            and (not help_type or document["helpType"] == help_type)
        ]

    def update_help_request_status(self, request_id: str, status: str) -> bool:
        if request_id not in self.help_requests:
            return False
        self.help_requests[request_id]["status"] = status
        return True

    def increment_volunteer_count(self, request_id: str) -> Optional[HelpRequest]:
        if request_id not in self.help_requests:
            return None
        self.help_requests[request_id]["volunteerCount"] += 1
        return self.find_help_request(request_id)

    def find_help_requests_by_ids(self, request_ids: Iterable[str]) -> Dict[str, HelpRequest]:
        help_requests = (self.find_help_request(request_id) for request_id in set(request_ids))
        return {help_request.id: help_request for help_request in help_requests if help_request}

    # Volunteer responses

    def create_volunteer_response(self, response: VolunteerResponse) -> str:
        if self.find_volunteer_response_for(response.request_id, response.volunteer_id):
            raise DuplicateDocumentError("Document already exists in volunteer_responses")
        return self._put(self.volunteer_responses, response)

    def find_volunteer_response(self, response_id: str) -> Optional[VolunteerResponse]:
        document = self.volunteer_responses.get(response_id)
        return VolunteerResponse.from_document(document) if document else None

    def find_volunteer_response_for(self, request_id: str, volunteer_id: str) -> Optional[VolunteerResponse]:
        for document in self.volunteer_responses.values():
            if document["requestId"] == request_id and document["volunteerId"] == volunteer_id:
                return VolunteerResponse.from_document(document)
        return None

    def list_volunteer_responses(self, volunteer_id: str) -> List[VolunteerResponse]:
        documents = [
            document for document in self.volunteer_responses.values()
            if document["volunteerId"] == volunteer_id
        ]
        documents.sort(key=lambda document: document["createdAt"], reverse=True)
        return [VolunteerResponse.from_document(document) for document in documents]

    def update_volunteer_response_status(self, response_id: str, status: str) -> bool:
        if response_id not in self.volunteer_responses:
            return False
        self.volunteer_responses[response_id].update({
            "status": status,
            "updatedAt": datetime.now(timezone.utc)
        })
        return True

    # Resources

    def create_resource(self, resource: Resource) -> str:
        return self._put(self.resources, resource)

    def find_resource(self, resource_id: str) -> Optional[Resource]:
        document = self.resources.get(resource_id)
        return Resource.from_document(document) if document else None

    def list_available_resources(self) -> List[Resource]:
        documents = [
            document for document in self.resources.values()
            if document["status"] == "available"
        ]
        documents.sort(key=lambda document: document["createdAt"], reverse=True)
        return [Resource.from_document(document) for document in documents]

    def update_resource_status(self, resource_id: str, status: str) -> bool:
        if resource_id not in self.resources:
            return False
        self.resources[resource_id]["status"] = status
        return True


@pytest.fixture
def settings():
    """Settings for the test environment."""
    return Settings(
        environment="test",
        jwt_secret=TEST_JWT_SECRET,
        redis_url="",
        otel_enabled=False,
        cors_allowed_origins="http://localhost:5173"
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def auth_service():
    return AuthService(TEST_JWT_SECRET)


@pytest.fixture
def app(settings, store, auth_service):
    """Application wired to the in-memory store with rate limiting disabled."""
    app = create_app(
        settings,
        mongodb_service=store,
        redis_service=RedisService(),
        auth_service=auth_service
    )
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_user(client):
    """Sign up a user through the API; returns (user_id, auth headers)."""
    def _register(name: str, email: str, phone: str = "555-000-1111", password: str = "correct-horse"):
        response = client.post('/api/auth/signup', json={
            "name": name,
            "email": email,
            "phone": phone,
            "password": password
        })
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture
def contact_info():
    return ContactInfo(
        name="Maria Santos",
        address="123 Main St, Springfield",
        phone="5551234567",
        email="maria@example.com"
    )


@pytest.fixture
def make_help_request(contact_info):
    """Build help requests with sensible defaults."""
    base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _make(user_id: str = "owner-1", urgency: str = "Medium", minutes: int = 0, **overrides):
        fields = {
            "user_id": user_id,
            "private_data": contact_info,
            "help_type": "Food",
            "urgency": urgency,
            "description": "Need supplies",
            "created_at": base_time + timedelta(minutes=minutes)
        }
        fields.update(overrides)
        return HelpRequest(**fields)
    return _make
