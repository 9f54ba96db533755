"""
Shared fixtures: sample travel-time data loaded into an in-process MongoDB
(mongomock-motor) in both store layouts.
"""
import os
import uuid

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from mongomock_motor import AsyncMongoMockClient

from core.config import Settings
from repositories.destinations import (
    DenormalizedDestinationRepository,
    SplitDestinationRepository,
)

SEOUL = "서울특별시"
BUSAN = "부산광역시"
ISLAND = "제주특별자치도"

# One document per (place, origin) pair.
DENORMALIZED_ROWS = [
    {"id": 1, "name": "남이섬", "address": "강원특별자치도 춘천시 남산면 남이섬길 1",
     "cluster": "강원특별자치도", "departure_location": SEOUL, "drive_time": 1.5, "transit_time": 2.0,
     "image": "https://example.com/nami.jpg", "description": "강 위의 섬"},
    {"id": 2, "name": "속초해수욕장", "address": "강원특별자치도 속초시 해오름로 186",
     "cluster": "강원특별자치도", "departure_location": SEOUL, "drive_time": 3.0, "transit_time": 3.5},
    {"id": 3, "name": "성산일출봉", "address": "제주특별자치도 서귀포시 성산읍",
     "cluster": ISLAND, "departure_location": SEOUL, "drive_time": None, "transit_time": 2.5,
     "is_jeju": True},
    # Island by address-derived cluster only.
    {"id": 4, "name": "우도", "address": "제주특별자치도 제주시 우도면",
     "departure_location": SEOUL, "drive_time": 2.8},
    # Mis-tagged cluster; island only by address substring.
    {"id": 5, "name": "협재해수욕장", "address": "제주 제주시 한림읍 협재리",
     "cluster": "7", "departure_location": SEOUL, "drive_time": 2.0},
    {"id": 6, "name": "불국사", "address": "경상북도 경주시 불국로 385",
     "cluster": "경상북도", "departure_location": SEOUL, "drive_time": 3.5, "transit_time": 4.0},
    # No explicit cluster; falls back to the first address token.
    {"id": 7, "name": "전주 한옥마을", "address": "전라북도 전주시 완산구 기린대로 99",
     "departure_location": SEOUL, "drive_time": 2.9},
    {"id": 8, "name": "해운대", "address": "부산광역시 해운대구",
     "cluster": "부산광역시", "departure_location": BUSAN, "drive_time": 0.5, "transit_time": 0.7},
    {"id": 9, "name": "시간 미상", "address": "충청남도 공주시",
     "cluster": "충청남도", "departure_location": SEOUL, "drive_time": None, "transit_time": None},
    # Unresolvable cluster.
    {"id": 10, "name": "주소 없음", "address": "", "departure_location": SEOUL, "drive_time": 1.0},
]

PLACES = [
    {"id": 1, "name": "남이섬", "address": "강원특별자치도 춘천시 남산면", "cluster": "강원특별자치도"},
    {"id": 2, "name": "속초해수욕장", "address": "강원특별자치도 속초시", "cluster": "강원특별자치도"},
    {"id": 3, "name": "성산일출봉", "address": "제주특별자치도 서귀포시 성산읍", "cluster": ISLAND},
    {"id": 4, "name": "불국사", "address": "경상북도 경주시 불국로 385"},
    {"id": 5, "name": "단양 도담삼봉", "address": "충청북도 단양군", "cluster": "충청북도"},
]

TRAVEL_TIMES = [
    {"cluster": "강원특별자치도", "departure_location": SEOUL, "drive_time": 1.5, "transit_time": 2.0},
    {"cluster": "강원특별자치도", "departure_location": SEOUL, "drive_time": 9.0, "transit_time": 9.0},
    {"cluster": ISLAND, "departure_location": SEOUL, "drive_time": None, "transit_time": 2.5},
    {"cluster": "경상북도", "departure_location": SEOUL, "drive_time": 3.5, "transit_time": 4.0},
    {"cluster": "강원특별자치도", "departure_location": BUSAN, "drive_time": 4.0, "transit_time": 5.0},
]


@pytest.fixture
def settings():
    return Settings(RATE_LIMIT_ENABLED=False)


@pytest.fixture
def split_settings():
    return Settings(RATE_LIMIT_ENABLED=False, STORE_LAYOUT="split")


@pytest.fixture
def mongo_db():
    return AsyncMongoMockClient()[f"randomtrip_{uuid.uuid4().hex}"]


@pytest.fixture
async def denormalized_repo(mongo_db, settings):
    await mongo_db[settings.DESTINATIONS_COLLECTION].insert_many([dict(r) for r in DENORMALIZED_ROWS])
    return DenormalizedDestinationRepository(mongo_db, settings)


@pytest.fixture
async def split_repo(mongo_db, split_settings):
    await mongo_db[split_settings.PLACES_COLLECTION].insert_many([dict(p) for p in PLACES])
    await mongo_db[split_settings.TRAVEL_TIMES_COLLECTION].insert_many([dict(t) for t in TRAVEL_TIMES])
    return SplitDestinationRepository(mongo_db, split_settings)
