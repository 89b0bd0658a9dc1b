import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("chalet_bookings")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

def build_beat_schedule(sweep_interval: float) -> dict:
    """Beat entries for the given sweep interval in seconds."""
    return {
        # Auto-cancel Pending bookings older than BOOKINGS_AUTO_CANCEL_AFTER
        "auto-cancel-stale-bookings": {
            "task": "bookings.auto_cancel_stale_bookings",
            "schedule": sweep_interval,
            # A run still queued when the next one is due is dropped
            "options": {"expires": max(sweep_interval - 10, sweep_interval / 2)},
        },
    }


@app.on_after_configure.connect
def configure_beat_schedule(sender, **kwargs):
    from django.conf import settings  # type: ignore

    sender.conf.beat_schedule = build_beat_schedule(float(settings.BOOKINGS_SWEEP_INTERVAL_SECONDS))


app.conf.timezone = "UTC"
