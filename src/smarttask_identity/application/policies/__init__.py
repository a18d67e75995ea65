from smarttask_identity.application.policies.lockout_policy import LockoutPolicy

__all__ = ["LockoutPolicy"]
