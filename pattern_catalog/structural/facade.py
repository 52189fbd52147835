r"""Facade.

One object with a few intention-level methods in front of several
subsystems that would otherwise need many ordered calls. Clients call
`watch_movie` and never see the audio, video, lighting, climate and
security APIs behind it.

The banking facade also turns subsystem failures (`AccessDenied`,
`NotFound`, `PreconditionFailed`) into a single boolean answer plus one
narrated reason.
"""

from __future__ import annotations

import logging
import sys
from typing import Dict

from ..catalog import register_demo, run_standalone
from ..core import AccessDenied, CatalogError, DemoContext, Narrator, NotFound, PreconditionFailed

__all__ = [
    "AudioSystem",
    "VideoSystem",
    "LightingSystem",
    "ClimateControl",
    "SecuritySystem",
    "HomeTheaterFacade",
    "CPU",
    "Memory",
    "HardDrive",
    "GraphicsCard",
    "ComputerFacade",
    "AccountManager",
    "SecurityManager",
    "TransactionLogger",
    "NotificationService",
    "BankingFacade",
]

logger = logging.getLogger(__name__)


def _on_off(enabled: bool) -> str:
    return "enabled" if enabled else "disabled"


# -----------------------------------------------------------------------------
# Home Theater Subsystems
# -----------------------------------------------------------------------------


class _Subsystem:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator


class AudioSystem(_Subsystem):
    def power_on(self) -> None:
        self.narrator.say("[Audio] Powering on audio system...")
        self.narrator.pause(500)

    def power_off(self) -> None:
        self.narrator.say("[Audio] Powering off audio system...")

    def set_volume(self, volume: int) -> None:
        self.narrator.say(f"[Audio] Setting volume to {volume}")

    def set_surround_sound(self, enabled: bool) -> None:
        self.narrator.say(f"[Audio] Surround sound {_on_off(enabled)}")

    def play_audio(self, source: str) -> None:
        self.narrator.say(f"[Audio] Playing audio from {source}")


class VideoSystem(_Subsystem):
    def power_on(self) -> None:
        self.narrator.say("[Video] Powering on video system...")
        self.narrator.pause(700)

    def power_off(self) -> None:
        self.narrator.say("[Video] Powering off video system...")

    def set_resolution(self, resolution: str) -> None:
        self.narrator.say(f"[Video] Setting resolution to {resolution}")

    def set_hdr(self, enabled: bool) -> None:
        self.narrator.say(f"[Video] HDR {_on_off(enabled)}")

    def play_video(self, source: str) -> None:
        self.narrator.say(f"[Video] Playing video from {source}")


class LightingSystem(_Subsystem):
    def dim_lights(self, percentage: int) -> None:
        self.narrator.say(f"[Lighting] Dimming lights to {percentage}%")

    def set_ambient_lighting(self, mood: str) -> None:
        self.narrator.say(f"[Lighting] Setting ambient lighting to {mood} mode")

    def turn_off(self) -> None:
        self.narrator.say("[Lighting] Turning off all lights")


class ClimateControl(_Subsystem):
    def set_temperature(self, temperature: int) -> None:
        self.narrator.say(f"[Climate] Setting temperature to {temperature}°F")

    def set_fan_speed(self, speed: int) -> None:
        self.narrator.say(f"[Climate] Setting fan speed to {speed}")

    def turn_off(self) -> None:
        self.narrator.say("[Climate] Turning off climate control")


class SecuritySystem(_Subsystem):
    def disarm(self) -> None:
        self.narrator.say("[Security] Disarming security system")

    def arm(self) -> None:
        self.narrator.say("[Security] Arming security system")

    def lock_doors(self) -> None:
        self.narrator.say("[Security] Locking all doors")

    def unlock_doors(self) -> None:
        self.narrator.say("[Security] Unlocking doors")


class HomeTheaterFacade:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.audio = AudioSystem(narrator)
        self.video = VideoSystem(narrator)
        self.lighting = LightingSystem(narrator)
        self.climate = ClimateControl(narrator)
        self.security = SecuritySystem(narrator)

    def watch_movie(self, movie: str) -> None:
        say = self.narrator.say
        say(f"\n=== Starting Movie: {movie} ===")
        self.security.disarm()
        self.security.lock_doors()
        self.lighting.dim_lights(20)
        self.lighting.set_ambient_lighting("movie")
        self.climate.set_temperature(72)
        self.climate.set_fan_speed(2)
        self.audio.power_on()
        self.audio.set_volume(8)
        self.audio.set_surround_sound(True)
        self.video.power_on()
        self.video.set_resolution("4K")
        self.video.set_hdr(True)
        say(f"\n🎬 Now playing: {movie}")
        self.audio.play_audio("Blu-ray")
        self.video.play_video("Blu-ray")
        say("🍿 Enjoy your movie!")

    def end_movie(self) -> None:
        self.narrator.say("\n=== Ending Movie Session ===")
        self.audio.power_off()
        self.video.power_off()
        self.lighting.dim_lights(100)
        self.climate.turn_off()
        self.security.unlock_doors()
        self.security.arm()
        self.narrator.say("Movie session ended. All systems reset.")

    def listen_to_music(self, playlist: str) -> None:
        self.narrator.say(f"\n=== Starting Music: {playlist} ===")
        self.audio.power_on()
        self.audio.set_volume(6)
        self.audio.set_surround_sound(False)
        self.lighting.set_ambient_lighting("relaxing")
        self.lighting.dim_lights(60)
        self.climate.set_temperature(70)
        self.narrator.say(f"🎵 Now playing: {playlist}")
        self.audio.play_audio("Streaming")

    def party_mode(self) -> None:
        self.narrator.say("\n=== Activating Party Mode ===")
        self.security.disarm()
        self.security.unlock_doors()
        self.audio.power_on()
        self.audio.set_volume(10)
        self.audio.set_surround_sound(True)
        self.lighting.set_ambient_lighting("party")
        self.lighting.dim_lights(80)
        self.climate.set_temperature(68)
        self.climate.set_fan_speed(3)
        self.narrator.say("🎉 Party mode activated! Let's dance!")
        self.audio.play_audio("Streaming")

    def good_night(self) -> None:
        self.narrator.say("\n=== Good Night Mode ===")
        self.audio.power_off()
        self.video.power_off()
        self.lighting.turn_off()
        self.climate.set_temperature(65)
        self.climate.set_fan_speed(1)
        self.security.lock_doors()
        self.security.arm()
        self.narrator.say("😴 Good night! All systems secured.")


# -----------------------------------------------------------------------------
# Computer Subsystems
# -----------------------------------------------------------------------------


class CPU(_Subsystem):
    def boot(self) -> None:
        self.narrator.say("[CPU] Booting processor...")

    def shutdown(self) -> None:
        self.narrator.say("[CPU] Shutting down processor...")

    def execute(self, instruction: str) -> None:
        self.narrator.say(f"[CPU] Executing: {instruction}")


class Memory(_Subsystem):
    def load(self, program: str) -> None:
        self.narrator.say(f"[Memory] Loading {program} into memory")

    def clear(self) -> None:
        self.narrator.say("[Memory] Clearing memory")


class HardDrive(_Subsystem):
    def spin_up(self) -> None:
        self.narrator.say("[HDD] Spinning up hard drive...")

    def spin_down(self) -> None:
        self.narrator.say("[HDD] Spinning down hard drive...")

    def read_data(self, name: str) -> None:
        self.narrator.say(f"[HDD] Reading {name} from disk")


class GraphicsCard(_Subsystem):
    def initialize(self) -> None:
        self.narrator.say("[GPU] Initializing graphics card...")

    def shutdown(self) -> None:
        self.narrator.say("[GPU] Shutting down graphics card...")

    def render(self, scene: str) -> None:
        self.narrator.say(f"[GPU] Rendering {scene}")


class ComputerFacade:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.cpu = CPU(narrator)
        self.memory = Memory(narrator)
        self.drive = HardDrive(narrator)
        self.gpu = GraphicsCard(narrator)
        self.running = False

    def start(self) -> None:
        self.narrator.say("\n=== Starting Computer ===")
        self.cpu.boot()
        self.memory.load("Operating System")
        self.drive.spin_up()
        self.gpu.initialize()
        self.cpu.execute("system_startup")
        self.running = True
        self.narrator.say("💻 Computer ready!")

    def run_game(self, game: str) -> None:
        self.narrator.say(f"\n=== Running Game: {game} ===")
        if not self.running:
            self.narrator.say("❌ Computer is off. Start it first.")
            return
        self.drive.read_data(game)
        self.memory.load(game)
        self.cpu.execute("launch_game")
        self.gpu.render("game_scene")
        self.narrator.say(f"🎮 {game} is now running!")

    def shutdown(self) -> None:
        self.narrator.say("\n=== Shutting Down Computer ===")
        self.cpu.execute("save_state")
        self.memory.clear()
        self.gpu.shutdown()
        self.drive.spin_down()
        self.cpu.shutdown()
        self.running = False
        self.narrator.say("💤 Computer shut down safely.")


# -----------------------------------------------------------------------------
# Banking Subsystems
# -----------------------------------------------------------------------------


class AccountManager(_Subsystem):
    def __init__(self, narrator: Narrator, balances: Dict[str, float]):
        super().__init__(narrator)
        self.balances = dict(balances)

    def verify_account(self, account_id: str) -> None:
        self.narrator.say(f"[Account] Verifying account: {account_id}")
        if account_id not in self.balances:
            raise NotFound(
                "Invalid account!",
                [f"Known accounts: {', '.join(sorted(self.balances))}"],
                {"participant": "AccountManager", "operation": "verify_account"},
            )

    def get_balance(self, account_id: str) -> float:
        self.narrator.say(f"[Account] Retrieving balance for: {account_id}")
        return self.balances[account_id]

    def update_balance(self, account_id: str, amount: float) -> None:
        self.narrator.say(f"[Account] Updating balance for {account_id} by ${amount:.2f}")
        self.balances[account_id] += amount


class SecurityManager(_Subsystem):
    TRANSACTION_LIMIT = 5000.0

    def __init__(self, narrator: Narrator, credentials: Dict[str, str]):
        super().__init__(narrator)
        self._credentials = dict(credentials)

    def authenticate(self, user_id: str, password: str) -> None:
        self.narrator.say(f"[Security] Authenticating user: {user_id}")
        if self._credentials.get(user_id) != password:
            raise AccessDenied(
                "Authentication failed!",
                ["Check the user id and password"],
                {"participant": "SecurityManager", "operation": "authenticate"},
            )

    def authorize_transaction(self, user_id: str, amount: float) -> None:
        self.narrator.say(f"[Security] Authorizing transaction of ${amount:.2f} for {user_id}")
        if amount > self.TRANSACTION_LIMIT:
            raise AccessDenied(
                "Transaction not authorized!",
                [f"Transfers are limited to ${self.TRANSACTION_LIMIT:.2f}"],
                {"participant": "SecurityManager", "operation": "authorize_transaction"},
            )


class TransactionLogger(_Subsystem):
    def log_transaction(self, kind: str, account_id: str, amount: float) -> None:
        self.narrator.say(f"[Logger] Recording {kind} of ${amount:.2f} for account {account_id}")
        logger.info("%s %s %.2f", kind, account_id, amount)


class NotificationService(_Subsystem):
    def send_notification(self, user_id: str, message: str) -> None:
        self.narrator.say(f"[Notification] Sending to {user_id}: {message}")


class BankingFacade:
    def __init__(
        self,
        narrator: Narrator,
        balances: Dict[str, float],
        credentials: Dict[str, str],
    ):
        self.narrator = narrator
        self.accounts = AccountManager(narrator, balances)
        self.security = SecurityManager(narrator, credentials)
        self.transactions = TransactionLogger(narrator)
        self.notifications = NotificationService(narrator)

    def check_balance(self, account_id: str, user_id: str, password: str) -> float:
        """Return the balance, or -1 when the request is refused."""
        self.narrator.say("\n=== Checking Account Balance ===")
        try:
            self.security.authenticate(user_id, password)
            self.accounts.verify_account(account_id)
        except CatalogError as exc:
            self.narrator.say(f"❌ {exc.message}")
            return -1
        balance = self.accounts.get_balance(account_id)
        self.transactions.log_transaction("BALANCE_INQUIRY", account_id, 0)
        self.narrator.say(f"💰 Current balance: ${balance:.2f}")
        return balance

    def transfer_money(
        self, from_account: str, to_account: str, amount: float, user_id: str, password: str
    ) -> bool:
        self.narrator.say("\n=== Processing Money Transfer ===")
        try:
            self.security.authenticate(user_id, password)
            self.accounts.verify_account(from_account)
            self.accounts.verify_account(to_account)
            self.security.authorize_transaction(user_id, amount)
            if self.accounts.get_balance(from_account) < amount:
                raise PreconditionFailed(
                    "Insufficient funds!",
                    [f"Available: ${self.accounts.balances[from_account]:.2f}"],
                    {"participant": "BankingFacade", "operation": "transfer_money"},
                )
        except CatalogError as exc:
            self.narrator.say(f"❌ {exc.message}")
            return False
        self.accounts.update_balance(from_account, -amount)
        self.accounts.update_balance(to_account, amount)
        self.transactions.log_transaction("TRANSFER", from_account, amount)
        self.notifications.send_notification(user_id, f"Transfer of ${amount:.2f} completed successfully")
        self.narrator.say("✅ Transfer completed successfully!")
        return True


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("facade", "Facade Pattern", "structural", "Home theater, computer start-up, banking")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Facade Pattern Demo ===")

    say("\n1. Home Theater System Facade:")
    say("=" * 50)
    theater = HomeTheaterFacade(narrator)
    theater.watch_movie("The Matrix")
    ctx.sleep(2000)
    theater.end_movie()
    ctx.sleep(1000)
    theater.listen_to_music("Chill Vibes Playlist")
    ctx.sleep(1000)
    theater.party_mode()
    ctx.sleep(1000)
    theater.good_night()

    say("\n\n2. Computer System Facade:")
    say("=" * 50)
    computer = ComputerFacade(narrator)
    computer.start()
    ctx.sleep(1000)
    computer.run_game("Cyberpunk 2077")
    ctx.sleep(1000)
    computer.shutdown()

    say("\n\n3. Banking System Facade:")
    say("=" * 50)
    bank = BankingFacade(
        narrator,
        balances={"12345": 1000.0, "67890": 500.0},
        credentials={"john_doe": "password123"},
    )
    bank.check_balance("12345", "john_doe", "password123")
    bank.transfer_money("12345", "67890", 250.00, "john_doe", "password123")
    bank.check_balance("12345", "john_doe", "password123")
    say("\nTrying large transfer:")
    bank.transfer_money("12345", "67890", 10000.00, "john_doe", "password123")
    say("\nTrying transfer beyond the balance:")
    bank.transfer_money("12345", "67890", 900.00, "john_doe", "password123")
    say("\nTrying wrong password:")
    bank.check_balance("12345", "john_doe", "hunter2")

    say("\n\n4. Complexity Hidden by Facade:")
    say("=" * 50)
    say("Without facade, a simple 'watch movie' operation would require:")
    say("- 15+ individual method calls across 5 different subsystems")
    say("- Knowledge of the correct sequence of operations")
    say("- Understanding of each subsystem's API")
    say('\nWith facade: theater.watch_movie("Movie Name") - Simple!')


if __name__ == "__main__":
    sys.exit(run_standalone("facade"))
