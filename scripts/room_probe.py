"""Create or join a room against a running room service, then leave it."""
from __future__ import annotations

import argparse
import asyncio
import logging

from roomclient import RoomSessionClient


def _parse_args() -> argparse.Namespace:
	parser = argparse.ArgumentParser(description=__doc__)
	parser.add_argument("room_id")
	parser.add_argument("--uid", default=None, help="Participant id (generated when omitted)")
	parser.add_argument("--join", action="store_true", help="Join an existing room instead of creating it")
	parser.add_argument("--base-url", default=None, help="Room service URL (defaults to ROOMCLIENT_BASE_URL)")
	return parser.parse_args()


async def main() -> None:
	args = _parse_args()
	uid = args.uid or RoomSessionClient.generate_user_id()

	async with RoomSessionClient(args.base_url) as client:
		if args.join:
			result = await client.join_room(args.room_id, uid)
		else:
			result = await client.create_room(args.room_id, uid)

		if not result.ok:
			print(f"{result.error.kind.value}: {result.error}")
			return

		room = result.descriptor
		print(f"room {room.room_id} via {room.url} (rtc_type={room.rtc_type})")
		print(f"creator={room.creator} participants={list(room.uids)} max={room.max_participants}")
		client.leave_room(room.room_id, uid)


if __name__ == "__main__":
	logging.basicConfig(level=logging.INFO)
	asyncio.run(main())
