"""
Scheduler: Triggers one trading cycle per 15-minute interval.

Ticks once a minute. A cycle fires during the first few seconds of the
minute before each boundary (hh:14, hh:29, hh:44, hh:59 UTC), leaving
~55 seconds to place the order before the venue's market opens.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Callable, Optional

from btc15_momentum.core.config import Config
from btc15_momentum.core.errors import ConfigurationError
from btc15_momentum.core.outcomes import CycleFailed
from btc15_momentum.utils.intervals import as_utc, interval_key, seconds_until_next_minute, utc_now

logger = logging.getLogger(__name__)


class IntervalScheduler:
    """
    Exactly-once-per-interval trigger.

    Dedup is keyed on the upcoming interval's start, not on the clock:
    several ticks inside the trigger window fire once. The key is committed
    before the cycle runs, so a failed cycle is not retried in the same interval.
    """

    def __init__(self, config: Config, cycle_callback: Callable[[datetime], object]):
        """
        Initialize scheduler.

        Args:
            config: System configuration
            cycle_callback: Called with the tick instant when an interval is due
        """
        self.config = config
        self.cycle_callback = cycle_callback
        self.running = False
        self.last_fired_interval_key: Optional[str] = None

    def check_trigger(self, now: datetime) -> Optional[datetime]:
        """
        Returns the upcoming interval start if a cycle should fire now, else None.

        Commits the interval key when it returns a value.
        """
        schedule = self.config.schedule
        now = as_utc(now)

        if now.minute % schedule.interval_minutes != schedule.interval_minutes - schedule.trigger_lead_minutes:
            return None

        if now.second > schedule.trigger_jitter_sec:
            return None

        interval_start = now.replace(second=0, microsecond=0) + timedelta(minutes=schedule.trigger_lead_minutes)
        key = interval_key(interval_start)
        if key == self.last_fired_interval_key:
            return None

        self.last_fired_interval_key = key
        return interval_start

    def tick(self, now: Optional[datetime] = None):
        """
        Run one scheduler tick.

        Returns:
            The cycle outcome if a cycle fired, else None
        """
        now = as_utc(now) if now is not None else utc_now()
        interval_start = self.check_trigger(now)
        if interval_start is None:
            return None

        logger.info(f"[Scheduler] Triggering cycle for interval {interval_start.isoformat()}")
        try:
            return self.cycle_callback(now)
        except ConfigurationError as e:
            logger.critical(f"[Scheduler] Configuration error, stopping: {e}")
            self.running = False
            raise
        except Exception as e:
            # Continue running despite errors
            logger.exception(f"[Scheduler] ERROR during trading cycle: {e}")
            return CycleFailed.from_exception(e, {"interval": interval_start.isoformat()})

    def run_forever(self):
        """
        Run scheduler loop indefinitely.

        Blocks until stopped. Wakes at the start of every minute.
        """
        self.running = True
        logger.info(f"[Scheduler] Started. Interval={self.config.schedule.interval_minutes}m")

        while self.running:
            try:
                self.tick()
                time.sleep(seconds_until_next_minute(utc_now()))

            except KeyboardInterrupt:
                logger.info("[Scheduler] Interrupted by user")
                self.running = False
                break

            except ConfigurationError:
                raise

            except Exception as e:
                logger.exception(f"[Scheduler] ERROR in main loop: {e}")
                time.sleep(self.config.schedule.tick_seconds)

    def stop(self):
        """Stop the scheduler loop."""
        logger.info("[Scheduler] Stopping...")
        self.running = False
