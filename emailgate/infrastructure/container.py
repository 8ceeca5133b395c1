"""
Dependency Injection Container.
Wires the oracle adapter and the pacer into the validation use cases.
This is the ONLY place that knows about concrete implementations.
"""

from .config import Config
from .pacer import RequestPacer
from ..adapters.abstract_api_adapter import AbstractApiAdapter
from ..use_cases.validate_batch import ValidateBatchUseCase
from ..use_cases.validate_single import ValidateSingleUseCase


class Container:
    """
    Composes the full application object graph.
    Swap the oracle by changing a single line here.
    """

    def __init__(self, config: Config):
        self.config = config

        # ── Adapters ───────────────────────────────────────────────────────
        self.email_verifier = AbstractApiAdapter(
            api_key=config.abstract_api_key,
            api_url=config.abstract_api_url,
            timeout=config.lookup_timeout,
        )
        self.pacer = RequestPacer(min_interval=config.min_request_interval)

        # ── Use Cases ──────────────────────────────────────────────────────
        self.validate_single_use_case = ValidateSingleUseCase(
            email_verifier=self.email_verifier,
            lookup_timeout=config.lookup_timeout,
            syntax_precheck=config.syntax_precheck,
        )
        self.validate_batch_use_case = ValidateBatchUseCase(
            email_verifier=self.email_verifier,
            pacer=self.pacer,
            max_batch_size=config.max_batch_size,
            concurrency=config.batch_concurrency,
            lookup_timeout=config.lookup_timeout,
            rate_limit_penalty=config.rate_limit_penalty,
            syntax_precheck=config.syntax_precheck,
        )

    def configuration_status(self) -> dict:
        cfg = self.config
        return {
            **self.email_verifier.usage_info(),
            "min_request_interval": cfg.min_request_interval,
            "rate_limit_penalty": cfg.rate_limit_penalty,
            "lookup_timeout": cfg.lookup_timeout,
            "max_batch_size": cfg.max_batch_size,
            "batch_concurrency": cfg.batch_concurrency,
            "syntax_precheck": cfg.syntax_precheck,
        }
