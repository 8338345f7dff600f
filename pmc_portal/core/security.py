import hashlib
import hmac
import secrets
import string
import uuid
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from jose import jwt
from pmc_portal.core.config import get_settings

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

OTP_LENGTH = 6


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def generate_temp_password(length: int = 12) -> str:
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_otp_code() -> str:
    return f"{secrets.randbelow(10 ** OTP_LENGTH):0{OTP_LENGTH}d}"


def hash_otp(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def otp_matches(code: str, code_hash: str) -> bool:
    return hmac.compare_digest(hash_otp(code), code_hash)


def create_access_token(subject: str, email: str, role: str) -> tuple[str, str, datetime]:
    """Issue a bearer token; returns ``(token, jti, expires_at)``.

    ``role`` is the external role string, the same value the login response
    carries, so clients can remap it through one table.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expires_minutes)
    jti = uuid.uuid4().hex
    to_encode = {"sub": subject, "email": email, "role": role, "jti": jti, "exp": expire}
    token = jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, jti, expire


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def sign_payment_callback(payment_id: int, transaction_id: str, status: str) -> str:
    secret = settings.payment_callback_secret or ""
    message = f"{payment_id}|{transaction_id}|{status}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()
