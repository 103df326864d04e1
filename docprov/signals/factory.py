import random

from docprov.config.settings import Settings
from docprov.signals.base import BaseSignalProvider
from docprov.signals.providers import SimulatedSignalProvider, StaticSignalProvider


class SignalProviderFactory:
    """Creates the configured signal provider."""

    @classmethod
    def create(cls, settings: Settings) -> BaseSignalProvider:
        provider = settings.signal_provider.lower()
        if provider == "simulated":
            return SimulatedSignalProvider(random.Random(settings.signal_seed))
        if provider == "static":
            return StaticSignalProvider(
                confirmations=settings.static_confirmations,
                edge_suspicion=settings.static_edge_suspicion,
                font_count=settings.static_font_count,
                recompression_likelihood=settings.static_recompression_likelihood,
            )
        raise ValueError(
            f"Unknown signal provider '{provider}'. Choose from: ['simulated', 'static']"
        )
