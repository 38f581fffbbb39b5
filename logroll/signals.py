"""Process signal subscriptions that request an immediate roll."""

import asyncio
import logging
import signal

logger = logging.getLogger(__name__)

ROTATE_SIGNALS = (signal.SIGHUP, signal.SIGUSR2)


class SignalSubscription:
    """Handle returned by a subscription; ``cancel()`` removes the handlers."""

    def __init__(self, loop: asyncio.AbstractEventLoop, signals):
        self._loop = loop
        self._signals = tuple(signals)

    def cancel(self):
        for sig in self._signals:
            self._loop.remove_signal_handler(sig)
        self._signals = ()


def loop_signal_subscription(loop: asyncio.AbstractEventLoop, callback,
                             signals=ROTATE_SIGNALS) -> SignalSubscription:
    """Route each of *signals* to *callback* on *loop*."""
    installed = []
    for sig in signals:
        try:
            loop.add_signal_handler(sig, callback)
        except (NotImplementedError, RuntimeError, ValueError) as e:
            logger.warning("Cannot install handler for %s: %s", signal.Signals(sig).name, e)
            continue
        installed.append(sig)
    return SignalSubscription(loop, installed)


def no_signals(loop, callback) -> SignalSubscription:
    """Subscription that installs nothing, for embedding without signal ownership."""
    return SignalSubscription(loop, ())
