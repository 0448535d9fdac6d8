"""In-memory implementation of OtpNotifier for testing."""


class FakeOtpNotifier:
    def __init__(self, fail: bool = False):
        self.sent: list[tuple[str, str]] = []
        self.fail = fail

    def send(self, recipient: str, code: str) -> bool:
        if self.fail:
            raise ConnectionError("SMTP server unreachable")
        self.sent.append((recipient, code))
        return True

    def last_code_for(self, recipient: str) -> str | None:
        for sent_to, code in reversed(self.sent):
            if sent_to == recipient:
                return code
        return None
