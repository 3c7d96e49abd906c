import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from mangashelf.core.security import get_password_hash, verify_password
from mangashelf.crud.base import CRUDBase
from mangashelf.models.user import ROLE_ADMIN, ROLE_USER, User
from mangashelf.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_username(self, db: Session, *, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    def create(
        self, db: Session, *, obj_in: UserCreate, role: str = ROLE_USER
    ) -> User:
        db_obj = User(
            username=obj_in.username,
            password=get_password_hash(obj_in.password),
            role=role,
            nickname=obj_in.nickname,
            family_safe=True,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"Created user: {db_obj.username} (role={role})")
        return db_obj

    def authenticate(
        self, db: Session, *, username: str, password: str
    ) -> Optional[User]:
        user = self.get_by_username(db, username=username)
        if not user:
            return None
        if not verify_password(password, user.password):
            return None
        return user

    def update_profile(
        self,
        db: Session,
        *,
        db_obj: User,
        nickname: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> Tuple[User, Optional[str]]:
        """
        Update nickname and/or avatar.

        Returns the user and the avatar path that was replaced, so the caller
        can remove the old file.
        """
        replaced_avatar = None
        update_data = {}
        if nickname is not None:
            update_data["nickname"] = nickname.strip() or None
        if avatar is not None:
            if db_obj.avatar and db_obj.avatar != avatar:
                replaced_avatar = db_obj.avatar
            update_data["avatar"] = avatar
        user = self.update(db, db_obj=db_obj, obj_in=update_data)
        return user, replaced_avatar

    def toggle_family_safe(self, db: Session, *, db_obj: User) -> bool:
        db_obj.family_safe = not db_obj.family_safe
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(
            f"Family-safe mode for {db_obj.username} set to {db_obj.family_safe}"
        )
        return db_obj.family_safe

    def set_role(self, db: Session, *, username: str, role: str) -> int:
        """Change a user's role. Returns the number of rows affected."""
        affected = (
            db.query(User)
            .filter(User.username == username)
            .update({User.role: role}, synchronize_session=False)
        )
        db.commit()
        return affected

    def promote_to_admin(self, db: Session, *, username: str) -> int:
        return self.set_role(db, username=username, role=ROLE_ADMIN)


crud_user = CRUDUser(User)
