"""
Threaded comments and emoji reactions on manga, chapters and comments.
"""

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from mangashelf.core.exceptions import EmptyField, InvalidParentComment, TargetNotFound
from mangashelf.crud.comment import crud_comment
from mangashelf.crud.reaction import crud_reaction
from mangashelf.models.chapter import Chapter
from mangashelf.models.comment import Comment
from mangashelf.models.manga import Manga
from mangashelf.models.user import User
from mangashelf.schemas.comment import CommentAuthor, CommentCreate, CommentNode
from mangashelf.schemas.reaction import ReactionResponse
from mangashelf.schemas.social import CommentSort, TargetType

logger = logging.getLogger(__name__)

UPVOTE = "\U0001F44D"
DOWNVOTE = "\U0001F44E"

TARGET_MODELS = {
    TargetType.MANGA: Manga,
    TargetType.CHAPTER: Chapter,
    TargetType.COMMENT: Comment,
}


def resolve_target(db: Session, target_type: TargetType, target_id: int):
    """Load the row a comment or reaction points at, or raise 404."""
    target = db.get(TARGET_MODELS[target_type], target_id)
    if target is None:
        raise TargetNotFound(target_type.value, target_id)
    return target


def vote_score(reactions: Dict[str, int]) -> int:
    return reactions.get(UPVOTE, 0) - reactions.get(DOWNVOTE, 0)


def add_comment(
    db: Session,
    *,
    author: User,
    target_type: TargetType,
    target_id: int,
    obj_in: CommentCreate,
) -> CommentNode:
    body = obj_in.body.strip()
    if not body:
        raise EmptyField("body")
    resolve_target(db, target_type, target_id)

    if obj_in.parent_id is not None:
        parent = crud_comment.get(db, obj_in.parent_id)
        if (
            parent is None
            or parent.target_type != target_type.value
            or parent.target_id != target_id
        ):
            raise InvalidParentComment(obj_in.parent_id)

    comment = crud_comment.create_for_target(
        db,
        user_id=author.id,
        target_type=target_type,
        target_id=target_id,
        body=body,
        parent_id=obj_in.parent_id,
    )
    logger.info(
        f"User {author.id} commented on {target_type.value} {target_id} (ID: {comment.id})"
    )
    node = CommentNode.model_validate(comment)
    node.author = CommentAuthor.model_validate(author)
    return node


def _sort_roots(nodes: List[CommentNode], sort: CommentSort) -> List[CommentNode]:
    if sort == CommentSort.OLD:
        return sorted(nodes, key=lambda n: (n.created_at, n.id))
    if sort == CommentSort.BEST:
        return sorted(
            nodes, key=lambda n: (n.score, n.created_at, n.id), reverse=True
        )
    return sorted(nodes, key=lambda n: (n.created_at, n.id), reverse=True)


def list_comments(
    db: Session,
    *,
    target_type: TargetType,
    target_id: int,
    sort: CommentSort = CommentSort.NEW,
) -> List[CommentNode]:
    """
    Comment tree for a target.

    Roots follow ``sort``: ``new`` (newest first), ``old`` (oldest first) or
    ``best`` (upvotes minus downvotes, ties newest first). Replies always
    read oldest first under their parent.
    """
    rows = crud_comment.get_by_target(db, target_type=target_type, target_id=target_id)
    reactions = crud_reaction.get_counts_bulk(
        db, target_type=TargetType.COMMENT, target_ids=[c.id for c, _ in rows]
    )

    nodes: Dict[int, CommentNode] = {}
    for comment, user in rows:
        node = CommentNode.model_validate(comment)
        node.author = CommentAuthor.model_validate(user)
        node.reactions = reactions.get(comment.id, {})
        node.score = vote_score(node.reactions)
        nodes[comment.id] = node

    roots = []
    children: Dict[int, List[CommentNode]] = {}
    for node in nodes.values():
        if node.parent_id is not None and node.parent_id in nodes:
            children.setdefault(node.parent_id, []).append(node)
        else:
            roots.append(node)
    for parent_id, replies in children.items():
        nodes[parent_id].replies = sorted(replies, key=lambda n: (n.created_at, n.id))

    return _sort_roots(roots, sort)


def set_reaction(
    db: Session, *, user: User, target_type: TargetType, target_id: int, emoji: str
) -> ReactionResponse:
    emoji = emoji.strip()
    if not emoji:
        raise EmptyField("emoji")
    resolve_target(db, target_type, target_id)
    crud_reaction.upsert(
        db, user_id=user.id, target_type=target_type, target_id=target_id, emoji=emoji
    )
    reaction = crud_reaction.get_user_reaction(
        db, user_id=user.id, target_type=target_type, target_id=target_id
    )
    return ReactionResponse.model_validate(reaction)


def get_reaction_counts(
    db: Session, *, target_type: TargetType, target_id: int
) -> Dict[str, int]:
    return crud_reaction.get_counts(db, target_type=target_type, target_id=target_id)


def get_reaction_counts_bulk(
    db: Session, *, target_type: TargetType, target_ids: List[int]
) -> Dict[int, Dict[str, int]]:
    return crud_reaction.get_counts_bulk(
        db, target_type=target_type, target_ids=target_ids
    )
