"""Named data shapes shared across LocalStore."""

from localstore.contracts.json_types import (
    ConversationPage,
    ConversationRecord,
    FolderRecord,
    JSONObject,
    JSONValue,
    MergeResult,
    PromptRecord,
    ResponseEnvelope,
    StoreSnapshot,
    SubscriptionStatus,
    UserRecord,
)

__all__ = [
    "ConversationPage",
    "ConversationRecord",
    "FolderRecord",
    "JSONObject",
    "JSONValue",
    "MergeResult",
    "PromptRecord",
    "ResponseEnvelope",
    "StoreSnapshot",
    "SubscriptionStatus",
    "UserRecord",
]
