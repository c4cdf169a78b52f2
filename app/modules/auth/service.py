import logging
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.modules.profiles.service import ProfileService
from app.core.session import SessionContext, SessionRegistry, session_registry
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, supabase: Client, registry: Optional[SessionRegistry] = None):
        self.supabase = supabase
        self.registry = registry or session_registry
        self.profiles = ProfileService(supabase)

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth and create their role-tagged profile"""
        try:
            user_metadata = {"role": register_data.role}
            if register_data.first_name:
                user_metadata["first_name"] = register_data.first_name
            if register_data.last_name:
                user_metadata["last_name"] = register_data.last_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            email = auth_response.user.email or register_data.email
            self.profiles.create_profile(
                user_id=auth_response.user.id,
                email=email,
                role=register_data.role,
                first_name=register_data.first_name,
                last_name=register_data.last_name
            )
            logger.info(f"Registered {register_data.role} {auth_response.user.id}")

            return RegisterResponse(
                user_id=auth_response.user.id,
                email=email,
                role=register_data.role,
                message="User registered successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            logger.error(f"Registration failed: {error_message}")
            raise HTTPException(status_code=500, detail="Registration failed")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate with Supabase Auth and open a session"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid email or password")

            user = auth_response.user
            session = self._build_session(
                token=auth_response.session.access_token,
                user_id=user.id,
                email=user.email or login_data.email,
                user_metadata=user.user_metadata or {}
            )
            self.registry.open(session)
            logger.info(f"Session opened for {session.role} {session.user_id}")

            return TokenResponse(
                access_token=session.access_token,
                token_type="bearer",
                user_id=session.user_id,
                email=session.email,
                role=session.role
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            logger.error(f"Login failed: {error_message}")
            raise HTTPException(status_code=500, detail="Login failed")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from a Supabase Auth token"""
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            return {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def resolve_session(self, token: str) -> SessionContext:
        """Return the open session for token, opening one from Supabase Auth if needed"""
        session = self.registry.get(token)
        if session is not None:
            return session
        user_data = self.get_current_user(token)
        session = self._build_session(
            token=token,
            user_id=user_data["id"],
            email=user_data["email"] or "",
            user_metadata=user_data["user_metadata"]
        )
        return self.registry.open(session)

    def logout(self, token: str) -> bool:
        """Close the session and sign out of Supabase Auth"""
        closed = self.registry.close(token)
        try:
            # Supabase Auth tokens are stateless JWTs; they expire on their own
            self.supabase.auth.sign_out()
        except Exception as e:
            logger.warning(f"Supabase sign_out failed: {e}")
        return closed

    def _build_session(self, token: str, user_id: str, email: str, user_metadata: Dict[str, Any]) -> SessionContext:
        try:
            profile = self.profiles.get_profile_row(user_id)
        except Exception as e:
            logger.error(f"Error loading profile for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load profile")
        role = (profile or {}).get("role") or user_metadata.get("role")
        if not role:
            raise HTTPException(status_code=403, detail="No profile found for this account")
        return SessionContext(
            user_id=user_id,
            email=email,
            role=role,
            access_token=token,
            profile=profile or {},
            user_metadata=user_metadata
        )
