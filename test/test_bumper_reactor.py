from turtlebot_follower.bumper_reactor import BumperEvent, BumperReactor
from turtlebot_follower.commands import Command
from turtlebot_follower.states import BumperSide, BumperTransition

LEFT_CMD = Command(-0.2, -0.4)
CENTER_CMD = Command(-0.2, -0.5)
RIGHT_CMD = Command(-0.2, 0.4)


def press(side):
    return BumperEvent(side, BumperTransition.PRESSED)


def release(side):
    return BumperEvent(side, BumperTransition.RELEASED)


def run_out(reactor, limit=100):
    commands = []
    while reactor.evading and len(commands) < limit:
        commands.append(reactor.tick())
    return commands


def test_idle_reactor_emits_nothing():
    reactor = BumperReactor()

    assert not reactor.evading
    assert reactor.tick() is None


def test_press_arms_evasion():
    reactor = BumperReactor()

    armed = reactor.handle(press(BumperSide.LEFT))

    assert armed
    assert reactor.evading
    assert reactor.active_side == BumperSide.LEFT
    assert reactor.is_pressed(BumperSide.LEFT)
    assert reactor.remaining_ticks == 15


def test_left_and_right_run_fifteen_ticks():
    for side, expected in ((BumperSide.LEFT, LEFT_CMD), (BumperSide.RIGHT, RIGHT_CMD)):
        reactor = BumperReactor()
        reactor.handle(press(side))

        commands = run_out(reactor)

        assert commands == [expected] * 15
        assert not reactor.evading
        assert reactor.remaining_ticks == 0
        assert reactor.tick() is None


def test_center_runs_twenty_ticks():
    reactor = BumperReactor()
    reactor.handle(press(BumperSide.CENTER))

    assert run_out(reactor) == [CENTER_CMD] * 20


def test_repeated_press_on_same_side_does_not_rearm():
    reactor = BumperReactor()
    reactor.handle(press(BumperSide.LEFT))
    for _ in range(3):
        reactor.tick()

    armed = reactor.handle(press(BumperSide.LEFT))

    assert not armed
    assert reactor.remaining_ticks == 12


def test_press_on_other_side_overrides_active_maneuver():
    reactor = BumperReactor()
    reactor.handle(press(BumperSide.LEFT))
    for _ in range(5):
        reactor.tick()

    armed = reactor.handle(press(BumperSide.CENTER))

    assert armed
    assert reactor.active_side == BumperSide.CENTER
    assert run_out(reactor) == [CENTER_CMD] * 20


def test_release_does_not_stop_evasion():
    reactor = BumperReactor()
    reactor.handle(press(BumperSide.RIGHT))
    reactor.tick()

    reactor.handle(release(BumperSide.RIGHT))

    assert not reactor.is_pressed(BumperSide.RIGHT)
    assert reactor.evading
    assert len(run_out(reactor)) == 14


def test_release_before_first_tick_drops_the_arm():
    finished = []
    reactor = BumperReactor()
    reactor.set_callbacks(on_complete=finished.append)
    reactor.handle(press(BumperSide.LEFT))
    reactor.handle(release(BumperSide.LEFT))

    assert reactor.tick() is None
    assert not reactor.evading
    assert reactor.active_side is None
    assert reactor.remaining_ticks == 0
    assert finished == []


def test_release_only_clears_its_own_side():
    reactor = BumperReactor()
    reactor.handle(press(BumperSide.LEFT))
    reactor.handle(press(BumperSide.RIGHT))

    reactor.handle(release(BumperSide.LEFT))

    assert not reactor.is_pressed(BumperSide.LEFT)
    assert reactor.is_pressed(BumperSide.RIGHT)


def test_press_after_release_rearms():
    reactor = BumperReactor()
    reactor.handle(press(BumperSide.LEFT))
    reactor.tick()
    reactor.handle(release(BumperSide.LEFT))

    assert reactor.handle(press(BumperSide.LEFT))
    assert reactor.remaining_ticks == 15


def test_completion_callback_reports_side():
    finished = []
    reactor = BumperReactor()
    reactor.set_callbacks(on_complete=finished.append)
    reactor.handle(press(BumperSide.CENTER))

    run_out(reactor)

    assert finished == [BumperSide.CENTER]


def test_reset_cancels_evasion():
    reactor = BumperReactor()
    reactor.handle(press(BumperSide.LEFT))

    reactor.reset()

    assert not reactor.evading
    assert not reactor.is_pressed(BumperSide.LEFT)
