"""Intent sum type: one variant per gated action a guest can attempt."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class IntentAction(str, Enum):
    CREATE_POST = "create_post"
    ADD_COMMENT = "add_comment"
    CAST_VOTE = "cast_vote"


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @property
    def scope_key(self) -> Optional[str]:
        """Entity id a scoped replay handler is bound to, if any."""
        return None


class CreatePostPayload(_Payload):
    category: str
    subtype: Literal["thread", "poll"] = "thread"
    title: str
    body: str
    poll_options: tuple[str, ...] = ()


class AddCommentPayload(_Payload):
    post_id: str
    comment_text: str
    comment_images: tuple[str, ...] = ()

    @property
    def scope_key(self) -> Optional[str]:
        return self.post_id


class CastVotePayload(_Payload):
    poll_id: str
    option_index: int = Field(ge=0)

    @property
    def scope_key(self) -> Optional[str]:
        return self.poll_id


class _Intent(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """camelCase dict, e.g. {"action": "cast_vote", "data": {"pollId": ...}}."""
        return self.model_dump(mode="json", by_alias=True)


class CreatePost(_Intent):
    action: Literal["create_post"] = "create_post"
    data: CreatePostPayload


class AddComment(_Intent):
    action: Literal["add_comment"] = "add_comment"
    data: AddCommentPayload


class CastVote(_Intent):
    action: Literal["cast_vote"] = "cast_vote"
    data: CastVotePayload


Intent = Annotated[Union[CreatePost, AddComment, CastVote], Field(discriminator="action")]
Payload = Union[CreatePostPayload, AddCommentPayload, CastVotePayload]

_intent_adapter: TypeAdapter[Intent] = TypeAdapter(Intent)


def parse_intent(raw: dict[str, Any]) -> Intent:
    """Build an intent from its wire form. Raises pydantic.ValidationError."""
    return _intent_adapter.validate_python(raw)


def create_post_intent(category: str, title: str, body: str, subtype: str = "thread",
                       poll_options: tuple[str, ...] = ()) -> CreatePost:
    return CreatePost(data=CreatePostPayload(
        category=category, subtype=subtype, title=title, body=body, poll_options=poll_options,
    ))


def add_comment_intent(post_id: str, comment_text: str, comment_images: tuple[str, ...] = ()) -> AddComment:
    return AddComment(data=AddCommentPayload(
        post_id=post_id, comment_text=comment_text, comment_images=comment_images,
    ))


def cast_vote_intent(poll_id: str, option_index: int) -> CastVote:
    return CastVote(data=CastVotePayload(poll_id=poll_id, option_index=option_index))
