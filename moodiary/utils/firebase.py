# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Moodiary - Your Daily Mood Diary project.
# Licensed under the MIT License - see the LICENSE file for details.

import json
import firebase_admin
from firebase_admin import credentials, firestore

from moodiary import config


def get_firestore_client():
    """
    Firestore client for the entry store.
    Initializes the Firebase Admin app only once per process.
    """
    if not firebase_admin._apps:
        raw_json = config.FIREBASE_ADMIN_JSON

        if not raw_json:
            raise ValueError("FIREBASE_ADMIN_JSON is not set in environment variables")

        try:
            if raw_json.strip().startswith("{"):
                # 🧠 Stringified JSON (e.g., hosted secrets)
                cred = credentials.Certificate(json.loads(raw_json))
            else:
                # 🧪 Local path to JSON (for dev)
                cred = credentials.Certificate(raw_json)

            firebase_admin.initialize_app(cred)

        except Exception as e:
            raise RuntimeError("❌ Failed to initialize Firebase Admin SDK") from e

    return firestore.client()
