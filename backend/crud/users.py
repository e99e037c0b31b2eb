from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from models.users import User


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def ensure_user(db: Session, claims: Dict[str, Any]) -> User:
    """
    Returns the user identified by the token claims, creating or refreshing
    the row from the claims when needed.
    """
    user_id = str(claims["sub"])
    username = claims.get("username") or claims.get("email") or user_id

    db_user = get_user(db, user_id)
    if db_user is None:
        db_user = User(
            id=user_id,
            username=username,
            email=claims.get("email"),
            first_name=claims.get("given_name"),
            last_name=claims.get("family_name"),
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user

    changed = False
    for attr, claim in (("email", "email"), ("first_name", "given_name"), ("last_name", "family_name")):
        value = claims.get(claim)
        if value and getattr(db_user, attr) != value:
            setattr(db_user, attr, value)
            changed = True

    if changed:
        db.commit()
        db.refresh(db_user)
    return db_user
