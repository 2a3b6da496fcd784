#!/usr/bin/env python3
"""
Book-and-cancel flow against a running server.

Only orchestrates API calls; every rule lives in the backend.

Usage:
    python scripts/flow_book_and_cancel.py --travel-date 2026-12-01
    python scripts/flow_book_and_cancel.py --travel-date 2026-12-01 --coach BUSINESS --row 2 --column 3

Flow:
    1. Register (or login) a passenger account
    2. Pick a route
    3. Quote the fare
    4. Show the seat map
    5. Book the seat
    6. Look the booking up by PNR
    7. Cancel it and confirm the seat is free again
"""

import argparse
import json
import sys

import httpx

BASE_URL = "http://localhost:8000"
API = f"{BASE_URL}/api/v1"


def authenticate(client: httpx.Client, username: str, email: str, password: str) -> str:
    """Register the account, falling back to login when it already exists."""
    response = client.post(
        f"{API}/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    if response.status_code == 422:
        response = client.post(f"{API}/auth/login", json={"username": username, "password": password})

    if response.status_code not in (200, 201):
        print(f"ERROR: Authentication failed: {response.status_code}")
        print(response.text)
        sys.exit(1)

    return response.json()["access_token"]


def call(client: httpx.Client, method: str, endpoint: str, **kwargs) -> dict:
    response = client.request(method, f"{API}{endpoint}", **kwargs)
    data = response.json() if response.text else {}
    if response.status_code >= 400:
        print(f"ERROR ({response.status_code}): {json.dumps(data, indent=2)}")
        sys.exit(1)
    return data


def print_step(step: int, title: str):
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def main():
    parser = argparse.ArgumentParser(description="Book a seat and cancel it")
    parser.add_argument("--travel-date", required=True, help="Travel date (YYYY-MM-DD)")
    parser.add_argument("--route-id", help="Route UUID (defaults to the first listed route)")
    parser.add_argument("--coach", default="ECONOMY")
    parser.add_argument("--row", type=int, default=1)
    parser.add_argument("--column", type=int, default=1)
    parser.add_argument("--passenger", default="Katniss Everdeen")
    parser.add_argument("--age", type=int, default=30)
    parser.add_argument("--username", default="flowtester")
    parser.add_argument("--email", default="flowtester@example.com")
    parser.add_argument("--password", default="Test@1234")
    args = parser.parse_args()

    with httpx.Client(timeout=10.0, follow_redirects=True) as client:
        print_step(1, "Authenticate")
        token = authenticate(client, args.username, args.email, args.password)
        client.headers["Authorization"] = f"Bearer {token}"
        print(f"Authenticated as {args.username}")

        print_step(2, "Pick a route")
        route_id = args.route_id
        if not route_id:
            routes = call(client, "GET", "/routes/")
            if not routes:
                print("ERROR: No routes available")
                sys.exit(1)
            route_id = routes[0]["id"]
            print(f"{routes[0]['name']} ({routes[0]['distance_km']} km)")

        print_step(3, "Quote fare")
        quote = call(client, "POST", "/bookings/fare", json={
            "route_id": route_id,
            "coach": args.coach,
            "passenger_age": args.age,
        })
        print(json.dumps(quote, indent=2))

        departure = {"routeId": route_id, "travelDate": args.travel_date, "coach": args.coach}

        print_step(4, "Seat map")
        seat_map = call(client, "GET", "/bookings/seat-map", params=departure)
        taken = [seat["label"] for seat in seat_map["seats"] if not seat["available"]]
        print(f"Taken: {', '.join(taken) or 'none'}")

        print_step(5, "Book seat")
        booking = call(client, "POST", "/bookings/", json={
            "route_id": route_id,
            "travel_date": args.travel_date,
            "coach": args.coach,
            "row": args.row,
            "column": args.column,
            "passenger_name": args.passenger,
            "passenger_age": args.age,
        })
        print(f"PNR {booking['pnr']} fare {booking['fare']} status {booking['status']}")

        print_step(6, "Look up by PNR")
        details = call(client, "GET", f"/bookings/pnr/{booking['pnr']}")
        print(f"{details['seat_label']} in {details['coach_name']} on {details['travel_date']}")

        print_step(7, "Cancel booking")
        cancelled = call(client, "POST", f"/bookings/{booking['id']}/cancel")
        print(cancelled["message"])

        booked = call(client, "GET", "/bookings/seats", params=departure)
        still_taken = {"row": args.row, "column": args.column} in booked
        print(f"Seat released: {not still_taken}")

    print("\n" + "="*60)
    print("FLOW COMPLETE")
    print("="*60)


if __name__ == "__main__":
    main()
