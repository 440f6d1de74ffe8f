"""Alert engine - runs every detection rule concurrently and aggregates counts.

Each rule runs as its own task with its own session and returns its own
count. A failing rule is reported in ``errors`` with a zero count; the other
rules still complete and are summed into ``total``.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from ..config import settings
from .rules import RULE_CLASSES, DetectionRule

logger = logging.getLogger(__name__)


@dataclass
class RuleOutcome:
    """Tagged result of one rule: a count, or the error that stopped it."""
    rule: str
    created: int = 0
    error: Optional[str] = None
    
    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CheckRunResult:
    """Aggregate of one orchestration pass."""
    counts_by_rule: Dict[str, int] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    total: int = 0
    skipped: bool = False
    
    @classmethod
    def from_outcomes(cls, outcomes: Iterable[RuleOutcome]) -> "CheckRunResult":
        result = cls()
        for outcome in outcomes:
            result.counts_by_rule[outcome.rule] = outcome.created
            if not outcome.ok:
                result.errors[outcome.rule] = outcome.error
        result.total = sum(result.counts_by_rule.values())
        return result


class AlertEngine:
    """Fan-out/fan-in over the detection rules."""
    
    def __init__(
        self,
        session_factory: Optional[async_sessionmaker] = None,
        rules: Optional[Iterable[DetectionRule]] = None,
        max_concurrent: Optional[int] = None,
    ):
        if rules is None:
            rules = [rule_cls(session_factory) for rule_cls in RULE_CLASSES]
        self.rules = list(rules)
        self.max_concurrent = max_concurrent or settings.max_concurrent_rules
        self._lock = asyncio.Lock()
    
    @property
    def is_running(self) -> bool:
        return self._lock.locked()
    
    async def _run_rule(self, rule: DetectionRule, semaphore: asyncio.Semaphore) -> RuleOutcome:
        async with semaphore:
            try:
                return RuleOutcome(rule=rule.name, created=await rule.run())
            except Exception as e:
                logger.error(f"[{rule.name}] check failed: {e}", exc_info=True)
                return RuleOutcome(rule=rule.name, error=str(e) or type(e).__name__)
    
    async def run_all_checks(self) -> CheckRunResult:
        """Run one detection pass over every rule.
        
        Never raises. A pass requested while another is still running is
        skipped; the dedup window covers passes run from other processes.
        """
        if self._lock.locked():
            logger.warning("Alert checks already running, skipping this pass")
            return CheckRunResult(skipped=True)
        
        async with self._lock:
            logger.info(f"Running {len(self.rules)} alert checks")
            semaphore = asyncio.Semaphore(self.max_concurrent)
            outcomes = await asyncio.gather(
                *[self._run_rule(rule, semaphore) for rule in self.rules]
            )
        
        result = CheckRunResult.from_outcomes(outcomes)
        if result.errors:
            logger.error(f"Alert checks finished with {len(result.errors)} failed rule(s): {sorted(result.errors)}")
        logger.info(f"Alert checks complete: {result.counts_by_rule} total={result.total}")
        return result


alert_engine = AlertEngine()
