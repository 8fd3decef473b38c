# storefront/services/profile_service.py
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.models.user import User
from storefront.schemas.profile import ProfileUpdate

logger = logging.getLogger(__name__)


def name_from_email(email: str) -> str:
    """Local part of the address, used until the shopper picks a name."""
    return email.split("@", 1)[0][:50] or email[:50]


class ProfileService:
    """
    Shopper profiles mirrored from verified token claims.
    """

    def get_or_provision(
        self,
        session: Session,
        user_id: uuid.UUID,
        email: str,
    ) -> User:
        """
        Return the profile for `user_id`, creating it on first sight.

        Two first requests for the same token can race to insert; the
        loser rolls back and reads the winner's row.
        """
        user = session.get(User, user_id)
        if user is not None:
            return user

        email = email.strip().lower()
        user = User(id=user_id, email=email, name=name_from_email(email))
        session.add(user)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            user = session.get(User, user_id)
            if user is None:
                raise
            return user

        session.refresh(user)
        logger.info("Provisioned profile %s", user_id)
        return user

    def update_profile(
        self,
        session: Session,
        user: User,
        payload: ProfileUpdate,
    ) -> User:
        user.name = payload.name
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
