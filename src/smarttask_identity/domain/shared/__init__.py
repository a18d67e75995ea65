from smarttask_identity.domain.shared.time import Clock, ensure_tz_aware, utc_now

__all__ = ["Clock", "ensure_tz_aware", "utc_now"]
