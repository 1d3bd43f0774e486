import uuid
import bcrypt

def get_password_hash(password: str) -> str:
    """Генерация хеша пароля"""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверка пароля"""
    return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())

def generate_token() -> str:
    """Случайный непрозрачный токен сессии"""
    return str(uuid.uuid4())
