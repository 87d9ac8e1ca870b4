#!/usr/bin/env python3
"""
Script to seed a running instance with a small cast of daters and matchmakers
"""

import asyncio
import os

import httpx

API_BASE = os.getenv("SWIPEMATCH_API", "http://localhost:8000/api/v1")

TEST_USERS = [
    {
        "name": "Sarah Johnson",
        "phone_number": "+15551234567",
        "user_type": "Dater",
        "gender": "female",
        "sexuality": "straight",
        "profile_data": {
            "age": 25,
            "height": "165",
            "year": "Senior",
            "city": "Stanford",
            "interests": ["Art", "Yoga", "Teaching"],
            "date_activities": ["Art galleries", "Yoga classes", "Coffee"],
            "photos": ["https://randomuser.me/api/portraits/women/1.jpg"],
        },
    },
    {
        "name": "John Smith",
        "phone_number": "+15551234568",
        "user_type": "Dater & Match Maker",
        "gender": "male",
        "sexuality": "straight",
        "profile_data": {
            "age": 26,
            "height": "180",
            "year": "Graduate",
            "city": "Stanford",
            "interests": ["Technology", "Coffee", "Reading"],
            "date_activities": ["Coffee", "Tech meetups", "Book clubs"],
            "photos": ["https://randomuser.me/api/portraits/men/1.jpg"],
        },
    },
    {
        "name": "Michael Chen",
        "phone_number": "+15551234569",
        "user_type": "Dater & Match Maker",
        "gender": "male",
        "sexuality": "straight",
        "profile_data": {
            "age": 27,
            "height": "178",
            "year": "Graduate",
            "city": "Stanford",
            "interests": ["Music", "Food", "Travel"],
            "date_activities": ["Concerts", "Food tours", "Travel"],
            "photos": ["https://randomuser.me/api/portraits/men/2.jpg"],
        },
    },
    {
        "name": "David Rodriguez",
        "phone_number": "+15551234570",
        "user_type": "Dater",
        "gender": "male",
        "sexuality": "straight",
        "profile_data": {
            "age": 26,
            "height": "182",
            "year": "Graduate",
            "city": "Stanford",
            "interests": ["Music", "Food", "Travel"],
            "date_activities": ["Concerts", "Food tours", "Travel"],
            "photos": ["https://randomuser.me/api/portraits/men/3.jpg"],
        },
    },
    {
        "name": "James Wilson",
        "phone_number": "+15551234571",
        "user_type": "Dater",
        "gender": "male",
        "sexuality": "straight",
        "profile_data": {
            "age": 27,
            "height": "185",
            "year": "Graduate",
            "city": "Stanford",
            "interests": ["Fitness", "Travel", "Cooking"],
            "date_activities": ["Gym", "Travel", "Cooking classes"],
            "photos": ["https://randomuser.me/api/portraits/men/4.jpg"],
        },
    },
]

# Sarah's matchmakers, and one matchmaker for each candidate
FRIENDSHIPS = [
    ("sarahjohnson", "johnsmith"),
    ("sarahjohnson", "michaelchen"),
    ("davidrodriguez", "johnsmith"),
    ("jameswilson", "michaelchen"),
]


def user_id_from_name(name: str) -> str:
    return "".join(name.split()).lower()


async def seed_users():
    """Create test users and connect them"""

    async with httpx.AsyncClient() as client:
        for user in TEST_USERS:
            user_data = {**user, "id": user_id_from_name(user["name"])}
            try:
                response = await client.post(f"{API_BASE}/users/", json=user_data)
                if response.status_code == 200:
                    print(f"  ✅ Created user: {user['name']} (ID: {user_data['id']})")
                else:
                    print(f"  ❌ Failed to create user {user['name']}: {response.text}")
            except httpx.HTTPError as e:
                print(f"  ❌ Error creating user {user['name']}: {e}")

        for user_id, friend_id in FRIENDSHIPS:
            try:
                response = await client.post(f"{API_BASE}/users/{user_id}/friends/{friend_id}")
                if response.status_code == 200:
                    print(f"  🤝 Connected {user_id} and {friend_id}")
                else:
                    print(f"  ❌ Failed to connect {user_id} and {friend_id}: {response.text}")
            except httpx.HTTPError as e:
                print(f"  ❌ Error connecting {user_id} and {friend_id}: {e}")

        for user_id, matchmaker_id in FRIENDSHIPS:
            response = await client.post(f"{API_BASE}/swipe-pools/{user_id}/{matchmaker_id}/refresh")
            if response.status_code == 200:
                pool = response.json()["pool"]
                print(f"  🔄 Pool of {matchmaker_id} for {user_id}: {len(pool)} candidates")
            else:
                print(f"  ❌ Failed to refresh pool of {matchmaker_id} for {user_id}: {response.text}")

    print("✅ Seeding completed!")


if __name__ == "__main__":
    asyncio.run(seed_users())
