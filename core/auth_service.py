# core/auth_service.py

import uuid
from typing import Callable, List, Optional
from pymongo import MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError
from passlib.context import CryptContext
from .config import settings
from .errors import AuthError
from .models import Session, UserAccount

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

MIN_PASSWORD_LENGTH = 6

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

SessionListener = Callable[[str, Optional[Session]], None]

class AuthService:
    """Handles user sign-up, sign-in and the current session, backed by MongoDB."""

    def __init__(self, db=None, db_name: str = settings.db_name):
        if db is None:
            db = MongoClient(settings.final_mongo_uri, tz_aware=True)[db_name]
        self.users_collection = db["users"]
        self._session: Optional[Session] = None
        self._listeners: List[SessionListener] = []
        try:
            self.users_collection.create_index("email", unique=True)
        except PyMongoError as e:
            print(f"---AUTH SERVICE: Could not ensure email index: {e}---")
        print("---AUTH SERVICE: Connected to MongoDB---")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    def get_password_hash(self, password: str) -> str:
        return pwd_context.hash(password)

    def _find_account(self, email: str) -> Optional[UserAccount]:
        try:
            data = self.users_collection.find_one({"email": email}, {"_id": 0})
        except PyMongoError as e:
            raise AuthError("Unable to reach the authentication service. Please try again later.") from e
        return UserAccount(**data) if data else None

    def sign_up(self, email: str, password: str, username: Optional[str] = None) -> UserAccount:
        email = (email or "").strip().lower()
        if not email or not password:
            raise AuthError("Email and password are required.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        if self._find_account(email):
            raise AuthError("An account with this email already exists.")

        account = UserAccount(
            user_id=str(uuid.uuid4()),
            email=email,
            username=(username or "").strip() or None,
            hashed_password=self.get_password_hash(password),
        )
        try:
            self.users_collection.insert_one(account.model_dump())
        except DuplicateKeyError as e:
            raise AuthError("An account with this email already exists.") from e
        except PyMongoError as e:
            raise AuthError("Unable to reach the authentication service. Please try again later.") from e

        print(f"---AUTH SERVICE: Created new user '{email}'---")
        return account

    def sign_in(self, email: str, password: str) -> Session:
        email = (email or "").strip().lower()
        account = self._find_account(email)
        if not account or not self.verify_password(password or "", account.hashed_password):
            raise AuthError("Invalid email or password.")

        self._session = Session(user_id=account.user_id, email=account.email, username=account.username)
        print(f"---AUTH SERVICE: Signed in '{email}'---")
        self._notify(SIGNED_IN, self._session)
        return self._session

    def sign_out(self) -> None:
        if self._session is None:
            return
        print(f"---AUTH SERVICE: Signed out '{self._session.email}'---")
        self._session = None
        self._notify(SIGNED_OUT, None)

    def get_session(self) -> Optional[Session]:
        return self._session

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Registers a listener for sign-in/sign-out events. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self, event: str, session: Optional[Session]) -> None:
        for listener in list(self._listeners):
            listener(event, session)
