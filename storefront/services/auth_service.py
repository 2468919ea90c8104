"""Registration, login, password reset and profile handling."""

from fastapi.responses import JSONResponse

from storefront.core.constants import PRIVATE_USER_FIELDS
from storefront.core.exceptions import DocumentNotFoundError
from storefront.core.responses import failure, respond, success
from storefront.core.security import Identity, TokenSigner, hash_password, verify_password
from storefront.core.validation import FieldRule, RequiredFields
from storefront.models import ForgotPasswordPayload, LoginPayload, ProfileUpdatePayload, RegisterPayload
from storefront.repositories.query import Query

REGISTER_FIELDS = RequiredFields.of(
    FieldRule("name", "Name is Required", key="error"),
    FieldRule("email", "Email is Required"),
    FieldRule("password", "Password is Required"),
    FieldRule("phone", "Phone no is Required"),
    FieldRule("address", "Address is Required"),
    FieldRule("answer", "Answer is Required"),
)

LOGIN_FIELDS = RequiredFields.of(
    FieldRule("email", "Invalid email or password"),
    FieldRule("password", "Invalid email or password"),
)

FORGOT_PASSWORD_FIELDS = RequiredFields.of(
    FieldRule("email", "Emai is required"),
    FieldRule("answer", "answer is required"),
    FieldRule("new_password", "New Password is required"),
)

MIN_PASSWORD_LENGTH = 6


def public_user(user: dict | None) -> dict | None:
    """Drop the password hash and security answer from a user document."""
    if user is None:
        return None
    return {key: value for key, value in user.items() if key not in PRIVATE_USER_FIELDS}


class AuthController:
    def __init__(self, user_repo, signer: TokenSigner, logger):
        self.user_repo = user_repo
        self.signer = signer
        self.logger = logger

    async def register(self, payload: RegisterPayload) -> JSONResponse:
        data = payload.model_dump()
        result = REGISTER_FIELDS.validate(data)
        if not result.ok:
            return respond(200, result.first.as_body())

        try:
            if await self.user_repo.get_by_email(payload.email):
                return failure(200, "Already Register please login")

            user = await self.user_repo.insert({**data, "password": hash_password(payload.password)})
            self.logger.info("User registered", user_id=user["_id"])
            return success(201, "User Register Successfully", user=public_user(user))
        except Exception as e:
            self.logger.error("Registration failed", email=payload.email, exc_info=True)
            return failure(500, "Errro in Registeration", error=e)

    async def login(self, payload: LoginPayload) -> JSONResponse:
        result = LOGIN_FIELDS.validate(payload.model_dump())
        if not result.ok:
            return failure(404, result.first.message)

        try:
            user = await self.user_repo.get_by_email(payload.email)
            if not user:
                return failure(404, "Email is not registerd")
            if not verify_password(payload.password, user["password"]):
                return failure(200, "Invalid Password")

            token = self.signer.create_access_token(user["_id"])
            return success(
                200,
                "login successfully",
                user={
                    "_id": user["_id"],
                    "name": user["name"],
                    "email": user["email"],
                    "phone": user["phone"],
                    "address": user["address"],
                    "role": user["role"],
                },
                token=token,
            )
        except Exception as e:
            self.logger.error("Login failed", email=payload.email, exc_info=True)
            return failure(500, "Error in login", error=e)

    async def forgot_password(self, payload: ForgotPasswordPayload) -> JSONResponse:
        result = FORGOT_PASSWORD_FIELDS.validate(payload.model_dump())
        if not result.ok:
            return respond(400, result.first.as_body())

        try:
            user = await self.user_repo.find_one(Query({"email": payload.email, "answer": payload.answer}))
            if not user:
                return failure(404, "Wrong Email Or Answer")

            await self.user_repo.update_by_id(user["_id"], {"password": hash_password(payload.new_password)})
            self.logger.info("Password reset", user_id=user["_id"])
            return success(200, "Password Reset Successfully")
        except Exception as e:
            self.logger.error("Password reset failed", email=payload.email, exc_info=True)
            return failure(500, "Something went wrong", error=e)

    async def test(self) -> JSONResponse:
        return respond(200, "Protected Routes")

    async def user_auth(self) -> JSONResponse:
        return respond(200, {"ok": True})

    async def admin_auth(self) -> JSONResponse:
        return respond(200, {"ok": True})

    async def update_profile(self, identity: Identity, payload: ProfileUpdatePayload) -> JSONResponse:
        """Update the signed-in user's profile.

        Omitted fields keep their stored values. The email cannot be changed here, and the password
        is only re-hashed when a new one is given.
        """
        if payload.password and len(payload.password) < MIN_PASSWORD_LENGTH:
            return respond(200, {"error": "Passsword is required and 6 character long"})

        try:
            user = await self.user_repo.find_by_id(identity.user_id)
            if user is None:
                raise DocumentNotFoundError(f"User with id '{identity.user_id}' not found")

            changes = {
                "name": payload.name or user["name"],
                "password": hash_password(payload.password) if payload.password else user["password"],
                "phone": payload.phone or user["phone"],
                "address": payload.address or user["address"],
            }
            updated = await self.user_repo.update_by_id(identity.user_id, changes)
            return success(200, "Profile Updated SUccessfully", updatedUser=public_user(updated))
        except Exception as e:
            self.logger.error("Profile update failed", user_id=identity.user_id, exc_info=True)
            return failure(400, "Error WHile Update profile", error=e)
