"""Reference bot that plays Deepdelve Server via the REST API.

Creates a character, equips nothing, and fights a wolf, playing each turn
by picking simple tactical actions:
  - Below half health, drink a potion of healing if one is carried.
  - Otherwise attack the most wounded enemy, with the off-hand too if possible.
Between fights it short rests while it can, then long rests.

Usage:
    1. Start the server:  uvicorn main:app --reload
    2. Run this bot:      python bots/example_bot.py [fights]
"""

import sys

import httpx

BASE_URL = "http://127.0.0.1:8000"


def _create_character(client: httpx.Client, name: str) -> dict:
    """Create a strength-heavy character and return its credentials."""
    resp = client.post(
        "/characters",
        json={"name": name, "strength": 6, "dexterity": 2, "constitution": 2},
    )
    resp.raise_for_status()
    return resp.json()


def _choose_turn(state: dict) -> dict:
    """Pick an action and bonus action from the encounter view."""
    me = state["character"]
    enemies = [e for e in state["enemies"] if e["current_health"] > 0]
    if not enemies:
        return {}
    target = min(enemies, key=lambda e: e["current_health"])

    turn = {"action": {"kind": "attack", "target_id": target["id"]}}
    potion = next(
        (b for b in state["bonus_actions"] if b["item"] == "potion_of_healing"), None,
    )
    if potion is not None and me["current_health"] * 2 < state["max_health"]:
        turn["bonus_action"] = {"kind": "item", "item": "potion of healing"}
    elif any(b["kind"] == "attack" for b in state["bonus_actions"]):
        turn["bonus_action"] = {"kind": "attack", "target_id": target["id"]}
    return turn


def _print_events(events: list[dict]) -> None:
    for event in events:
        parts = [event["kind"], event["character_name"]]
        if event.get("target_name"):
            parts.append(f"-> {event['target_name']}")
        if event.get("amount") is not None:
            parts.append(str(event["amount"]))
        if event.get("name"):
            parts.append(f"({event['name']})")
        print("  " + " ".join(parts))


def fight(client: httpx.Client, monster: str) -> str:
    """Fight one monster to the end. Returns the character's final status."""
    resp = client.post("/encounter", json={"monsters": [monster]})
    resp.raise_for_status()
    result = resp.json()
    _print_events(result["events"])

    while result["status"] == "fighting" and result["current_health"] > 0:
        resp = client.get("/encounter")
        resp.raise_for_status()
        state = resp.json()

        turn = _choose_turn(state)
        resp = client.post("/encounter/turn", json=turn)
        if resp.status_code >= 400:
            print(f"  Turn rejected: {resp.json()['detail']}")
            break
        result = resp.json()
        _print_events(result["events"])

    return result["status"] if result["current_health"] > 0 else "dead"


def rest(client: httpx.Client) -> None:
    """Short rest if any are left, otherwise long rest."""
    resp = client.post("/characters/me/rest", json={"kind": "short"})
    if resp.status_code == 400:
        resp = client.post("/characters/me/rest", json={"kind": "long"})
    resp.raise_for_status()


def main() -> None:
    """Create a character and fight wolves until it dies or the count runs out."""
    fights = int(sys.argv[1]) if len(sys.argv) > 1 else 3
    client = httpx.Client(base_url=BASE_URL, timeout=10.0)

    print("Creating character...")
    credentials = _create_character(client, "Gruk")
    print(f"  Character ID: {credentials['id']}")

    client = httpx.Client(
        base_url=BASE_URL,
        timeout=10.0,
        headers={
            "X-Character-Id": credentials["id"],
            "Authorization": f"Bearer {credentials['secret']}",
        },
    )

    for number in range(1, fights + 1):
        print(f"\n--- FIGHT {number} ---")
        status = fight(client, "wolf")
        if status == "dead":
            print("\n*** Gruk has fallen ***")
            return
        rest(client)

    resp = client.get("/characters/me")
    resp.raise_for_status()
    sheet = resp.json()
    print(f"\nDone: {sheet['experience']} experience, {sheet['gold']} gold")


if __name__ == "__main__":
    main()
