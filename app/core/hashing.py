from passlib.context import CryptContext

#pbkdf2 avoids the bcrypt backend version issues
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class Hasher:
    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        return pwd_context.hash(password)
