# SPDX-License-Identifier: Apache-2.0

"""
Disaster relief coordination API.

Help requests, volunteer commitments and donated resources, with contact
details disclosed only to the requester and committed volunteers.
"""

__version__ = "1.0.0"
