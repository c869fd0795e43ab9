# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy.types import TypeDecorator, Text
from cryptography.fernet import Fernet

from moodiary import config

_fernet = None


def get_fernet() -> Fernet:
    global _fernet
    if _fernet is None:
        # 🔐 Get Fernet secret
        if not config.FERNET_SECRET:
            raise EnvironmentError("FERNET_SECRET is missing. Please set it in your environment or .env file.")
        try:
            _fernet = Fernet(config.FERNET_SECRET)
        except Exception as e:
            raise ValueError("FERNET_SECRET is invalid. Make sure it is a valid 32-byte base64 string.") from e
    return _fernet


# 🔐 Encrypt/Decrypt helpers
def encrypt(text: str) -> str:
    return get_fernet().encrypt(text.encode()).decode()


def decrypt(token: str) -> str:
    return get_fernet().decrypt(token.encode()).decode()


# 🧩 Custom Encrypted DB Field (diary notes)
class EncryptedTypeHybrid(TypeDecorator):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return encrypt(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return decrypt(value)
        return value
