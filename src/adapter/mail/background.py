"""Defers OTP delivery until after the HTTP response is sent."""

from fastapi import BackgroundTasks

from port.notifier import OtpNotifier


class BackgroundOtpNotifier:
    """OtpNotifier that schedules the wrapped notifier on BackgroundTasks.

    ``send`` only queues the delivery, so it reports True; the real outcome
    is logged by the wrapped notifier.
    """

    def __init__(self, notifier: OtpNotifier, background_tasks: BackgroundTasks):
        self.notifier = notifier
        self.background_tasks = background_tasks

    def send(self, recipient: str, code: str) -> bool:
        self.background_tasks.add_task(self.notifier.send, recipient, code)
        return True
