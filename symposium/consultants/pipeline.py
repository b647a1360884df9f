"""
Consultant Pipeline - Runs one consultant turn end to end.

Steps, in order:
1. Load the consultant's API configuration (cached on the strategy)
2. Interpret the request
3. Execute the external call, if interpretation asked for one
4. Format the reply
5. Write exactly one audit record, on success and on failure

Failures from any step are re-raised after the audit record is written.
"""
import time
from typing import Any, Dict, Optional

from symposium.consultants.base import ConsultantStrategy
from symposium.core.audit import AuditRecord, AuditSink, serialize_payload
from symposium.core.logging_config import get_logger

logger = get_logger(__name__)


class ConsultantPipeline:
    """
    Orchestrates a strategy's interpret/execute/format steps.

    Example:
        >>> pipeline = ConsultantPipeline(strategy, audit_sink=DatabaseAuditSink())
        >>> pipeline.process("How many doctors are there?", context)
        'There are 12 doctors in the Contacts table.'
    """

    def __init__(self, strategy: ConsultantStrategy, audit_sink: Optional[AuditSink] = None):
        self.strategy = strategy
        self.audit_sink = audit_sink

    def process(self, user_message: str, context: str) -> str:
        """
        Produce the consultant's reply to a user message.

        Raises:
            SymposiumError: Whatever execute_api_call (or an unexpected
                failure in another step) raised
        """
        start = time.perf_counter()
        consultant_id = self.strategy.consultant_id
        action = None

        try:
            self.strategy.load_api_config()

            action = self.strategy.interpret_request(user_message, context)

            action_result = None
            if action.needs_api_call:
                logger.info(f"Consultant {consultant_id} executing {action.action}")
                action_result = self.strategy.execute_api_call(action)

            final_response = self.strategy.format_response(
                user_message, action, action_result, context
            )
        except Exception as e:
            logger.error(f"Pipeline failed for consultant={consultant_id}: {e}")
            request = {"user_message": user_message}
            if action is not None:
                request["api_action"] = action.to_dict()
            self._audit(
                request=request,
                response=None,
                success=False,
                error_message=str(e) or type(e).__name__,
                start=start,
            )
            raise

        self._audit(
            request={"user_message": user_message, "api_action": action.to_dict()},
            response={"api_response": action_result, "final_response": final_response},
            success=True,
            error_message=None,
            start=start,
        )
        return final_response

    def _audit(
        self,
        request: Dict[str, Any],
        response: Optional[Dict[str, Any]],
        success: bool,
        error_message: Optional[str],
        start: float,
    ) -> None:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        if self.audit_sink is None:
            return
        self.audit_sink.append(AuditRecord(
            consultant_id=self.strategy.consultant_id,
            adapter_type=self.strategy.adapter_type,
            request=serialize_payload(request),
            response=serialize_payload(response),
            success=success,
            error_message=error_message,
            elapsed_ms=elapsed_ms,
        ))
