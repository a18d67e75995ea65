from smarttask_identity.infrastructure.audit.logging_audit_sink import LoggingAuditSink

__all__ = ["LoggingAuditSink"]
