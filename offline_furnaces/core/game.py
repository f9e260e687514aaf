from __future__ import annotations

import logging
import threading
import time
from queue import Empty, Queue
from typing import Dict, Iterable, Optional

import esper

from offline_furnaces.core.commands import parse_player_connected, parse_player_disconnected
from offline_furnaces.core.metrics import metrics
from offline_furnaces.core.permissions import PermissionGate
from offline_furnaces.core.players import find_player
from offline_furnaces.core.plugin import OfflineFurnaces
from offline_furnaces.core.tasks import TaskRegistry
from offline_furnaces.core.time_utils import isoformat_utc, utc_now
from offline_furnaces.models import Oven, Player, Team
from offline_furnaces.systems import TaskSchedulerSystem

logger = logging.getLogger(__name__)


class GameWorld:
    """Host world: ECS state, the tick loop and the Offline Furnaces plugin.

    All world mutation happens on the loop thread. Other threads hand work
    over through ``queue_command``; queued commands run at the start of the
    next tick, before the processors.
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        self.world = esper.World()
        self.running = False
        self.game_thread: Optional[threading.Thread] = None
        self.command_queue: Queue = Queue()

        self.permissions = PermissionGate()
        self.tasks = TaskRegistry()

        # Register systems
        self.world.add_processor(TaskSchedulerSystem(self.tasks))

        self.plugin = OfflineFurnaces(self.world, self.permissions, self.tasks, config_path=config_path)

    # --- World population helpers ---

    def add_player(self, name: str, user_id: int, connected: bool = True) -> int:
        return self.world.create_entity(Player(name=name, user_id=user_id, connected=connected))

    def create_team(self, team_id: int, member_ids: Iterable[int], leader_id: int = 0) -> int:
        members = set(member_ids)
        if not leader_id and members:
            leader_id = min(members)
        return self.world.create_entity(Team(team_id=team_id, leader_id=leader_id, members=members))

    def place_oven(self, short_prefab_name: str, owner_id: int = 0, cooking: bool = True) -> int:
        return self.world.create_entity(
            Oven(short_prefab_name=short_prefab_name, owner_id=owner_id, cooking=cooking)
        )

    # --- Lifecycle ---

    def start_game_loop(self) -> None:
        """Load the plugin and start the game loop in a separate thread."""
        if not self.running:
            if not self.plugin.loaded:
                self.plugin.init()
            self.running = True
            self.game_thread = threading.Thread(target=self._game_loop, daemon=True)
            self.game_thread.start()
            logger.info("Game loop started")

    def stop_game_loop(self) -> None:
        """Stop the game loop, then unload the plugin."""
        self.running = False
        if self.game_thread:
            self.game_thread.join()
            self.game_thread = None
            logger.info("Game loop stopped")
        if self.plugin.loaded:
            self.plugin.unload()

    def tick(self) -> None:
        """Run one tick: drain queued commands, then run all processors."""
        self._process_commands()
        self.world.process()

    def _game_loop(self) -> None:
        """Main game loop - runs one tick per TICK_RATE seconds.

        Uses time.monotonic() for scheduling and records tick duration and
        start-time jitter.
        """
        from offline_furnaces.core.config import get_tick_rate

        period_s = get_tick_rate()
        next_tick = time.monotonic()
        while self.running:
            planned_start = next_tick
            actual_start = time.monotonic()
            jitter_s = actual_start - planned_start

            try:
                self.tick()
            except Exception:
                logger.warning(
                    "Tick failed",
                    extra={
                        "user_id": None,
                        "entity_id": None,
                        "action_context": "loop:tick",
                    },
                    exc_info=True,
                )

            elapsed = time.monotonic() - actual_start
            metrics.record_tick(elapsed, jitter_s=jitter_s)
            logger.debug(
                "tick_complete",
                extra={
                    "duration_ms": elapsed * 1000.0,
                    "jitter_ms": abs(jitter_s) * 1000.0,
                    "pending_tasks": len(self.tasks),
                },
            )

            next_tick = planned_start + period_s
            sleep_time = max(0.0, next_tick - time.monotonic())
            time.sleep(sleep_time)

    # --- Commands ---

    def queue_command(self, command: Dict) -> None:
        """Queue a command to be processed in the game loop."""
        logger.info(
            "queue_command",
            extra={
                "action_type": command.get('type'),
                "user_id": command.get('user_id'),
                "timestamp": isoformat_utc(utc_now()),
            },
        )
        self.command_queue.put(command)

    def _process_commands(self) -> None:
        """Process commands queued by other threads."""
        while True:
            try:
                command = self.command_queue.get_nowait()
            except Empty:
                return
            try:
                self._execute_command(command)
            except Exception:
                logger.error(
                    "Error processing command",
                    extra={
                        "action_type": command.get('type'),
                        "action_context": "loop:execute_command",
                    },
                    exc_info=True,
                )

    def _execute_command(self, command: Dict) -> None:
        cmd_type = command.get('type')

        if cmd_type == 'player_connected':
            uid = parse_player_connected(command)
            self._handle_player_connected(uid)
        elif cmd_type == 'player_disconnected':
            uid, reason = parse_player_disconnected(command)
            self._handle_player_disconnected(uid, reason)
        else:
            logger.warning("Unknown command type", extra={"action_type": cmd_type})

    def _handle_player_connected(self, user_id: int) -> None:
        player = find_player(self.world, user_id)
        if player is None:
            logger.debug("connect_unknown_player", extra={"user_id": user_id})
            return
        player.connected = True
        player.last_active = utc_now()

    def _handle_player_disconnected(self, user_id: int, reason: str) -> None:
        player = find_player(self.world, user_id)
        if player is None:
            logger.debug("disconnect_unknown_player", extra={"user_id": user_id})
            return
        player.connected = False
        player.last_active = utc_now()
        self.plugin.on_player_disconnected(player, reason)


__all__ = ["GameWorld"]
