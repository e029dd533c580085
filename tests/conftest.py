"""Shared fixtures: a small two-day trip as the extraction backend would send it."""
import copy
import json

import pytest

from tripsheet.models.itinerary import Trip


SAMPLE_PAYLOAD = {
    "tripTitle": "東北紅葉秘湯旅",
    "year": 2025,
    "month": "OCT",
    "participants": 6,
    "days": [
        {
            "date": "2025-10-28",
            "dayOfWeek": "TUE",
            "dayNumber": "28",
            "dayTitle": "Arrival in Sendai",
            "summary": "Fly in, beef tongue dinner",
            "location": "Sendai",
            "coordinates": {"lat": 38.2682, "lng": 140.8694},
            "events": [
                {
                    "id": "d1-e1",
                    "time": "09:30",
                    "endTime": "12:55",
                    "activity": "TPE → SDJ",
                    "notes": "",
                    "category": "TRANSPORT",
                    "details": {
                        "transportInfo": {
                            "departureTerminal": "T1",
                            "arrivalTerminal": "Domestic",
                            "flightNumber": "IT250",
                        }
                    },
                    "expense": {"amountPerPerson": 0, "currency": "JPY", "method": "CARD"},
                },
                {
                    "id": "d1-e2",
                    "time": "18:00",
                    "activity": "利久 西口本店",
                    "location": "Sendai Station",
                    "notes": "Beef tongue set",
                    "category": "food",
                    "estimatedTravelTime": "15 min",
                    "estimatedArrivalTime": "17:45",
                    "distance": "3 km",
                    "trafficStatus": "moderate",
                    "details": {
                        "japaneseName": "利久 西口本店",
                        "hiragana": "りきゅう にしぐちほんてん",
                        "phoneNumber": "022-266-5077",
                        "openingHours": "11:30-23:00",
                        "lastOrder": "22:30",
                        "popularDishes": [{"original": "牛たん定食", "translated": "Beef tongue set"}],
                    },
                    "expense": {
                        "amountPerPerson": 3000,
                        "currency": "JPY",
                        "method": "CASH",
                        "isEstimate": True,
                        "total": 999,
                    },
                },
            ],
        },
        {
            "date": "2025-10-29",
            "dayOfWeek": "WED",
            "dayNumber": "29",
            "dayTitle": "Nyuto Onsen",
            "summary": "Drive to the hidden hot springs",
            "location": "Nyuto Onsen",
            "events": [
                {
                    "id": "d2-e1",
                    "time": "15:00",
                    "activity": "鶴の湯温泉",
                    "category": "STAY",
                    "details": {
                        "mealPlan": "一泊二食",
                        "rooms": [{"name": "本陣", "description": "Thatched-roof room"}],
                        "onsen": {"hasPrivateBath": True, "hasOpenAir": True, "privateBathFee": "¥1,000"},
                        "coordinates": {"lat": 39.8036, "lng": 140.7669},
                    },
                    "expense": {"amountPerPerson": 15000, "method": "CARD", "peopleCount": 6, "total": 90000},
                },
                {
                    "id": "d2-e2",
                    "time": "16:30",
                    "activity": "田沢湖",
                    "category": "ACTIVITY",
                    "details": {"openingHours": "24h", "holidays": "None"},
                    "expense": {"amountPerPerson": 1200, "method": "CARD", "peopleCount": 2},
                },
            ],
        },
    ],
}


@pytest.fixture
def sample_payload():
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def sample_json(sample_payload):
    return json.dumps(sample_payload, ensure_ascii=False)


@pytest.fixture
def trip(sample_payload):
    return Trip.model_validate(sample_payload)
