# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from datetime import datetime
from moodiary.models.database import Base
from moodiary.utils.encryption import EncryptedTypeHybrid  # 🔐 Encryption utils

class MoodEntryRecord(Base):
    __tablename__ = "mood_entries"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String, nullable=False, index=True)
    date_key = Column(String(10), nullable=False)  # YYYY-MM-DD
    mood_type = Column(Integer, nullable=False)  # 1 (worst) .. 5 (best)

    note = Column(EncryptedTypeHybrid, nullable=True)  # 🔐 Encrypted

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (UniqueConstraint("account_id", "date_key", name="uq_account_date_key"),)
