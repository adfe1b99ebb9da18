# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
MongoDB service layer with connection pooling and per-collection operations.
"""

import logging
from datetime import datetime, timezone
from typing import List, Dict, Optional, Any, Iterable
from pymongo import MongoClient, ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import (
    ConnectionFailure,
    ServerSelectionTimeoutError,
    DuplicateKeyError
)
from bson import ObjectId
from bson.errors import InvalidId

from ..models.entities import User, HelpRequest, VolunteerResponse, Resource
from ..models.enums import ResourceStatus

logger = logging.getLogger(__name__)

USERS = "users"
HELP_REQUESTS = "help_requests"
VOLUNTEER_RESPONSES = "volunteer_responses"
RESOURCES = "resources"


class DuplicateDocumentError(ValueError):
    """Raised when an insert violates a unique index."""
    pass


class MongoDBService:
    """MongoDB service with lazy connection pooling."""

    def __init__(self, connection_string: str, database_name: str,
                 max_pool_size: int = 10, server_selection_timeout_ms: int = 5000):
        """Initialize MongoDB service; the connection opens on first use."""
        self.connection_string = connection_string
        self.database_name = database_name
        self.max_pool_size = max_pool_size
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[MongoClient] = None
        self._database: Optional[Database] = None

        logger.info(f"MongoDB service initialized for database: {self.database_name}")

    @property
    def client(self) -> MongoClient:
        """Get MongoDB client with connection pooling."""
        if self._client is None:
            try:
                self._client = MongoClient(
                    self.connection_string,
                    maxPoolSize=self.max_pool_size,
                    serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                    tz_aware=True,
                    retryWrites=True,
                    retryReads=True
                )
                self._client.admin.command('ping')
                logger.info("MongoDB connection established successfully")
            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                self._client = None
                raise

        return self._client

    @property
    def database(self) -> Database:
        """Get MongoDB database."""
        if self._database is None:
            self._database = self.client[self.database_name]
        return self._database

    def get_collection(self, collection_name: str) -> Collection:
        """Get MongoDB collection."""
        return self.database[collection_name]

    def close_connection(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    def health_check(self) -> Dict[str, Any]:
        """Check MongoDB connection health."""
        try:
            result = self.client.admin.command('ping')
            server_info = self.client.server_info()

            return {
                'status': 'healthy',
                'ping': result.get('ok') == 1,
                'version': server_info.get('version'),
                'database': self.database_name
            }
        except Exception as e:
            logger.error(f"MongoDB health check failed: {e}")
            return {
                'status': 'unhealthy',
                'error': str(e),
                'database': self.database_name
            }

    def _validate_object_id(self, doc_id: str) -> ObjectId:
        """Validate and convert string ID to ObjectId."""
        try:
            return ObjectId(doc_id)
        except (InvalidId, TypeError):
            raise ValueError(f"Invalid ObjectId format: {doc_id}")

    def _insert(self, collection: str, document: Dict) -> str:
        try:
            result = self.get_collection(collection).insert_one(document)
            logger.info(f"Created document in {collection}: {result.inserted_id}")
            return str(result.inserted_id)
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key error in {collection}: {e}")
            raise DuplicateDocumentError(f"Document already exists in {collection}")

    def _find_by_id(self, collection: str, doc_id: str) -> Optional[Dict]:
        try:
            object_id = self._validate_object_id(doc_id)
        except ValueError as e:
            logger.debug(f"Invalid document ID {doc_id}: {e}")
            return None
        return self.get_collection(collection).find_one({"_id": object_id})

    def _set_fields(self, collection: str, doc_id: str, updates: Dict) -> bool:
        try:
            object_id = self._validate_object_id(doc_id)
        except ValueError as e:
            logger.debug(f"Invalid document ID {doc_id}: {e}")
            return False

        result = self.get_collection(collection).update_one({"_id": object_id}, {"$set": updates})
        if result.matched_count == 0:
            logger.warning(f"No document updated for {doc_id} in {collection}")
            return False
        logger.info(f"Updated document {doc_id} in {collection}")
        return True

    # Users

    def create_user(self, user: User) -> str:
        """Insert a user; raises DuplicateDocumentError for a taken email."""
        return self._insert(USERS, user.to_document())

    def find_user_by_email(self, email: str) -> Optional[User]:
        document = self.get_collection(USERS).find_one({"email": email.lower()})
        return User.from_document(document) if document else None

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        document = self._find_by_id(USERS, user_id)
        return User.from_document(document) if document else None

    def find_users_by_ids(self, user_ids: Iterable[str]) -> Dict[str, User]:
        """Fetch several users at once, keyed by ID."""
        object_ids = []
        for user_id in set(user_ids):
            try:
                object_ids.append(self._validate_object_id(user_id))
            except ValueError:
                continue

        if not object_ids:
            return {}

        documents = self.get_collection(USERS).find({"_id": {"$in": object_ids}})
        users = [User.from_document(document) for document in documents]
        return {user.id: user for user in users}

    # Help requests

    def create_help_request(self, help_request: HelpRequest) -> str:
        return self._insert(HELP_REQUESTS, help_request.to_document())

    def find_help_request(self, request_id: str) -> Optional[HelpRequest]:
        document = self._find_by_id(HELP_REQUESTS, request_id)
        return HelpRequest.from_document(document) if document else None

    def list_help_requests(self, status: Optional[str] = None,
                           help_type: Optional[str] = None) -> List[HelpRequest]:
        """List help requests, optionally filtered by status and help type."""
        query: Dict[str, Any] = {}
        if status:
            query["status"] = status
        if help_type:
            query["helpType"] = help_type

        documents = self.get_collection(HELP_REQUESTS).find(query)
        help_requests = [HelpRequest.from_document(document) for document in documents]

        logger.debug(f"Found {len(help_requests)} help requests", extra={"filters": query})
        return help_requests

    def update_help_request_status(self, request_id: str, status: str) -> bool:
        return self._set_fields(HELP_REQUESTS, request_id, {"status": status})

    def increment_volunteer_count(self, request_id: str) -> Optional[HelpRequest]:
        """Atomically add one to a request's volunteer count."""
        try:
            object_id = self._validate_object_id(request_id)
        except ValueError:
            return None

        document = self.get_collection(HELP_REQUESTS).find_one_and_update(
            {"_id": object_id},
            {"$inc": {"volunteerCount": 1}},
            return_document=ReturnDocument.AFTER
        )
        return HelpRequest.from_document(document) if document else None

    # Volunteer responses

    def create_volunteer_response(self, response: VolunteerResponse) -> str:
        """Insert a response; the unique index rejects a second commit."""
        return self._insert(VOLUNTEER_RESPONSES, response.to_document())

    def find_volunteer_response(self, response_id: str) -> Optional[VolunteerResponse]:
        document = self._find_by_id(VOLUNTEER_RESPONSES, response_id)
        return VolunteerResponse.from_document(document) if document else None

    def find_volunteer_response_for(self, request_id: str, volunteer_id: str) -> Optional[VolunteerResponse]:
        document = self.get_collection(VOLUNTEER_RESPONSES).find_one({
            "requestId": request_id,
            "volunteerId": volunteer_id
        })
        return VolunteerResponse.from_document(document) if document else None

    def list_volunteer_responses(self, volunteer_id: str) -> List[VolunteerResponse]:
        """List a volunteer's responses, newest first."""
        cursor = self.get_collection(VOLUNTEER_RESPONSES).find(
            {"volunteerId": volunteer_id}
        ).sort("createdAt", DESCENDING)
        return [VolunteerResponse.from_document(document) for document in cursor]

    def find_help_requests_by_ids(self, request_ids: Iterable[str]) -> Dict[str, HelpRequest]:
        object_ids = []
        for request_id in set(request_ids):
            try:
                object_ids.append(self._validate_object_id(request_id))
            except ValueError:
                continue

        if not object_ids:
            return {}

        documents = self.get_collection(HELP_REQUESTS).find({"_id": {"$in": object_ids}})
        help_requests = [HelpRequest.from_document(document) for document in documents]
        return {help_request.id: help_request for help_request in help_requests}

    def update_volunteer_response_status(self, response_id: str, status: str) -> bool:
        return self._set_fields(VOLUNTEER_RESPONSES, response_id, {
            "status": status,
            "updatedAt": datetime.now(timezone.utc)
        })

    # Resources

    def create_resource(self, resource: Resource) -> str:
        return self._insert(RESOURCES, resource.to_document())

    def find_resource(self, resource_id: str) -> Optional[Resource]:
        document = self._find_by_id(RESOURCES, resource_id)
        return Resource.from_document(document) if document else None

    def list_available_resources(self) -> List[Resource]:
        """List available resources, newest first."""
        cursor = self.get_collection(RESOURCES).find(
            {"status": ResourceStatus.AVAILABLE.value}
        ).sort("createdAt", DESCENDING)
        return [Resource.from_document(document) for document in cursor]

    def update_resource_status(self, resource_id: str, status: str) -> bool:
        return self._set_fields(RESOURCES, resource_id, {"status": status})

    # Index Management

    def create_indexes(self) -> None:
        """Create unique and listing indexes for all collections."""
        try:
            logger.info("Creating MongoDB indexes...")

            users = self.get_collection(USERS)
            users.create_index("email", unique=True)

            help_requests = self.get_collection(HELP_REQUESTS)
            help_requests.create_index([("status", ASCENDING), ("helpType", ASCENDING)])
            help_requests.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])

            # One commitment per volunteer and request
            responses = self.get_collection(VOLUNTEER_RESPONSES)
            responses.create_index([("requestId", ASCENDING), ("volunteerId", ASCENDING)], unique=True)
            responses.create_index([("volunteerId", ASCENDING), ("createdAt", DESCENDING)])

            resources = self.get_collection(RESOURCES)
            resources.create_index([("status", ASCENDING), ("createdAt", DESCENDING)])

            logger.info("MongoDB indexes created successfully")

        except Exception as e:
            logger.error(f"Failed to create MongoDB indexes: {e}")
            raise
