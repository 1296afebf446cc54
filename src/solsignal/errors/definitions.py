"""Pre-built error instances for the ingress boundary."""

from __future__ import annotations

from solsignal.errors.alert_errors import MalformedRequest, Unauthorized

# -- Authentication --------------------------------------------------------

ErrUnauthorized = Unauthorized("Unauthorized")

# -- Validation ------------------------------------------------------------

ErrBodyNotJSON = MalformedRequest("request body is not valid JSON", code="body-not-json")
ErrEmptyBatch = MalformedRequest("activity batch is empty", code="empty-batch")
