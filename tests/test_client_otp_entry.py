from pmc_portal.client.otp_entry import OtpChallengeTimer, OtpEntry


def test_typing_advances_focus():
    entry = OtpEntry()
    for i, digit in enumerate("4821"):
        entry.enter(i, digit)
    assert entry.value == "4821"
    assert entry.focus == 4
    assert not entry.complete


def test_only_last_digit_is_kept_and_letters_ignored():
    entry = OtpEntry()
    entry.enter(0, "57")
    entry.enter(1, "x")
    assert entry.cells[:2] == ["7", ""]
    assert entry.focus == 1


def test_last_cell_keeps_focus():
    entry = OtpEntry()
    entry.enter(5, "9")
    assert entry.focus == 5


def test_backspace():
    entry = OtpEntry()
    entry.paste("123456")
    entry.backspace(5)
    assert entry.value == "12345"
    assert entry.focus == 5
    entry.backspace(5)
    assert entry.focus == 4
    entry.backspace(0)
    assert entry.cells[0] == ""


def test_out_of_range_cells_are_ignored():
    entry = OtpEntry()
    entry.paste("123456")
    entry.enter(6, "7")
    entry.enter(-1, "7")
    entry.backspace(6)
    entry.backspace(-1)
    assert entry.value == "123456"
    assert entry.focus == 5


def test_paste_fills_cells():
    entry = OtpEntry()
    entry.paste(" 98765432 ")
    assert entry.value == "987654"
    assert entry.complete
    assert entry.focus == 5

    entry.clear()
    entry.paste("12ab")
    assert entry.value == ""

    entry.paste("314")
    assert entry.value == "314"
    assert entry.focus == 2


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_challenge_timer():
    clock = FakeClock()
    timer = OtpChallengeTimer(clock=clock)
    assert timer.locked
    assert timer.can_resend

    timer.start()
    assert not timer.locked
    assert timer.remaining_label() == "05:00"
    assert timer.resend_in() == 30
    assert not timer.can_resend

    clock.now += 30
    assert timer.can_resend
    assert timer.remaining_label() == "04:30"

    clock.now += 270
    assert timer.expired
    assert timer.locked
    assert timer.remaining_label() == "00:00"

    timer.start()
    assert not timer.locked
