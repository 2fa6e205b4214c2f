import pytest

from shellgame.models import (
    CLICK_TO_PLAY, GAME_OVER, GIVE_UP, GOOD_JOB, YOU_LOST, YOU_WON,
    GameState, Phase, Side,
)


HIDE = 2000


def open_window(scheduler):
    scheduler.advance(HIDE)


def test_new_controller_is_stopped_and_invites_play(controller):
    assert controller.get_state() is GameState.STOPPED
    assert controller.session.level == 0
    assert controller.session.health == 3
    assert controller.session.ring_side is Side.MIDDLE
    assert controller.message.text == CLICK_TO_PLAY
    assert controller.message.tone == 'passive'


def test_start_resets_level_and_runs(controller, scheduler):
    controller.start()
    assert controller.get_state() is GameState.RUNNING
    # next_level already advanced to round 1
    assert controller.session.level == 1
    assert controller.score.text == 'Score: 0 / 10'
    assert controller.message.visible is False
    assert controller.hands.has_listeners()
    assert controller.session.phase is Phase.HIDING
    assert controller.ring.visible is True
    assert controller.hands.is_open() is True


def test_hidden_window_opens_after_hide_delay(controller, scheduler, byte_feed):
    byte_feed.values = [5]
    controller.start()
    scheduler.advance(HIDE - 1)
    assert not controller.session.ring_hidden
    scheduler.advance(1)
    assert controller.session.ring_hidden
    assert controller.session.ring_side is Side.LEFT
    assert controller.ring.side is Side.LEFT
    assert controller.ring.visible is False
    assert controller.hands.is_open() is False


def test_guess_without_window_is_ignored(controller, scheduler):
    assert controller.guess(Side.LEFT) is False
    assert controller.get_state() is GameState.STOPPED

    controller.start()
    before = controller.snapshot()
    assert controller.guess(Side.RIGHT) is False
    assert controller.snapshot() == before


def test_only_one_guess_per_window(controller, scheduler):
    controller.start()
    open_window(scheduler)
    assert controller.guess(Side.RIGHT) is True
    assert controller.guess(Side.LEFT) is False
    assert controller.session.level == 2
    assert controller.session.health == 3
    assert controller.session.rounds_played == 1


def test_correct_guess_advances_level(controller, scheduler):
    controller.start()
    open_window(scheduler)
    controller.hands.click(Side.RIGHT)
    assert controller.message.text == GOOD_JOB
    assert controller.score.text == 'Score: 1 / 10'
    assert controller.session.level == 2
    scheduler.advance(1000)
    assert controller.message.visible is False


def test_wrong_guess_costs_one_health_and_replays_round(controller, scheduler):
    controller.start()
    open_window(scheduler)
    controller.guess(Side.LEFT)
    assert controller.session.health == 2
    assert controller.health.get_remaining() == 2
    assert controller.message.text == YOU_LOST
    assert controller.message.tone == 'danger'
    assert controller.session.level == 1

    scheduler.advance(1000)
    assert controller.message.visible is False
    assert controller.ring.visible is True
    assert controller.session.phase is Phase.HIDING
    scheduler.advance(HIDE)
    assert controller.session.ring_hidden
    assert controller.get_state() is GameState.RUNNING


def test_ten_correct_guesses_win_without_health_loss(controller, scheduler):
    controller.start()
    for _ in range(10):
        open_window(scheduler)
        assert controller.guess(Side.RIGHT) is True
    assert controller.get_state() is GameState.RUNNING

    scheduler.advance(1000)
    assert controller.message.text == YOU_WON
    assert controller.message.tone == 'good'
    assert controller.score.text == 'Score: 10 / 10'
    assert controller.hands.is_open() is True
    assert controller.ring.visible is True

    scheduler.advance(3000)
    assert controller.get_state() is GameState.STOPPED
    scheduler.advance(1000)
    assert controller.session.outcome == 'won'
    assert controller.session.health == 3
    assert ('danger', YOU_LOST) not in controller.message.history
    assert controller.message.text == CLICK_TO_PLAY
    assert controller.ring.side is Side.MIDDLE
    assert not controller.hands.has_listeners()
    assert scheduler.pending == 0


def test_three_wrong_guesses_end_in_game_over(controller, scheduler):
    controller.start()
    open_window(scheduler)
    controller.guess(Side.LEFT)
    scheduler.advance(1000 + HIDE)
    controller.guess(Side.LEFT)
    scheduler.advance(1000 + HIDE)
    controller.guess(Side.LEFT)

    assert controller.session.health == 0
    assert controller.health.get_remaining() == 0
    assert controller.message.text == GAME_OVER
    assert controller.message.history.count(('danger', YOU_LOST)) == 2

    scheduler.advance(3000)
    assert controller.get_state() is GameState.STOPPED
    scheduler.advance(1000)
    assert controller.session.outcome == 'lost'
    assert not controller.session.ring_hidden
    assert scheduler.pending == 0


def test_give_up_before_first_window_ignores_later_guesses(controller, scheduler):
    controller.start()
    controller.give_up()
    assert controller.message.text == GIVE_UP
    scheduler.advance(1000)
    assert controller.get_state() is GameState.STOPPED
    scheduler.advance(5000)
    assert not controller.session.ring_hidden
    assert controller.guess(Side.RIGHT) is False
    assert controller.hands.click(Side.RIGHT) is False
    assert controller.session.outcome == 'gave_up'
    assert controller.message.text == CLICK_TO_PLAY


def test_give_up_closes_open_window(controller, scheduler):
    controller.start()
    open_window(scheduler)
    controller.give_up()
    assert controller.guess(Side.RIGHT) is False
    assert controller.session.level == 1


def test_give_up_while_stopped_is_a_no_op(controller, scheduler):
    history = list(controller.message.history)
    controller.give_up()
    assert controller.message.history == history
    assert scheduler.pending == 0
    assert controller.get_state() is GameState.STOPPED


def test_restart_while_running_drops_old_round(controller, scheduler, byte_feed):
    controller.start()
    open_window(scheduler)
    controller.guess(Side.RIGHT)
    assert byte_feed.calls == 1
    controller.start()
    assert controller.session.level == 1
    scheduler.advance(HIDE)
    # Only the restarted round conceals the ring
    assert byte_feed.calls == 2
    assert controller.session.ring_hidden


def test_start_during_stop_delay_keeps_new_game_listening(controller, scheduler):
    controller.start()
    open_window(scheduler)
    controller.guess(Side.LEFT)
    scheduler.advance(500)
    controller.stop()
    controller.start()
    scheduler.advance(1500)
    # The stale stop step would have detached the hands and parked the ring
    assert controller.hands.has_listeners()
    assert controller.get_state() is GameState.RUNNING
    scheduler.advance(HIDE)
    assert controller.session.ring_hidden
    assert controller.hands.click(Side.RIGHT) is True


def test_health_is_not_reset_by_start(controller, scheduler):
    controller.start()
    open_window(scheduler)
    controller.guess(Side.LEFT)
    controller.start()
    assert controller.session.health == 2


def test_health_reset_on_start_when_enabled(make_controller, scheduler):
    controller = make_controller(reset_health_on_start=True)
    controller.start()
    open_window(scheduler)
    controller.guess(Side.LEFT)
    assert controller.session.health == 2
    controller.start()
    assert controller.session.health == 3
    assert controller.health.get_remaining() == 3


def test_replay_after_loss_starts_on_last_life_and_never_goes_negative(controller, scheduler):
    controller.start()
    for _ in range(3):
        open_window(scheduler)
        controller.guess(Side.LEFT)
        scheduler.advance(1000)
    scheduler.run_until_idle()
    assert controller.session.health == 0

    controller.start()
    open_window(scheduler)
    controller.guess(Side.LEFT)
    assert controller.session.health == 0
    assert controller.health.get_remaining() == 0
    assert controller.message.text == GAME_OVER


def test_health_decreases_at_most_one_per_round(controller, scheduler):
    controller.start()
    previous = controller.session.health
    for side in (Side.LEFT, Side.RIGHT, Side.LEFT, Side.RIGHT, Side.LEFT):
        while not controller.session.ring_hidden and scheduler.pending:
            scheduler.run_next()
        if not controller.session.ring_hidden:
            break
        controller.guess(side)
        assert previous - controller.session.health in (0, 1)
        assert controller.session.health >= 0
        assert controller.session.health == controller.health.get_remaining()
        previous = controller.session.health


def test_guess_accepts_strings_and_rejects_middle(controller, scheduler):
    controller.start()
    open_window(scheduler)
    with pytest.raises(ValueError):
        controller.guess(Side.MIDDLE)
    with pytest.raises(ValueError):
        controller.guess('up')
    assert controller.session.ring_hidden
    assert controller.guess('right') is True


def test_close_drops_pending_steps(controller, scheduler):
    controller.start()
    controller.close()
    scheduler.run_until_idle()
    assert not controller.session.ring_hidden
    assert not controller.hands.has_listeners()


def test_snapshot_hides_ring_side_during_window(controller, scheduler):
    controller.start()
    open_window(scheduler)
    snap = controller.snapshot()
    assert snap['ring_hidden'] is True
    assert snap['ring_side'] is None
    assert snap['state'] == 'running'
    assert snap['phase'] == 'awaiting_guess'


def test_give_up_during_game_over_keeps_loss(controller, scheduler):
    controller.start()
    for _ in range(3):
        open_window(scheduler)
        controller.guess(Side.LEFT)
        scheduler.advance(1000)
    assert controller.session.outcome == 'lost'
    controller.give_up()
    scheduler.run_until_idle()
    assert controller.get_state() is GameState.STOPPED
    assert controller.session.outcome == 'lost'


def test_stop_hook_fires_when_game_over_timer_stops(make_controller, scheduler):
    stopped = []
    controller = make_controller()
    controller.on_stopped = lambda c: stopped.append(c.snapshot()['state'])
    controller.start()
    for _ in range(3):
        open_window(scheduler)
        controller.guess(Side.LEFT)
        scheduler.advance(1000)
    assert stopped == []
    scheduler.run_until_idle()
    assert stopped == ['stopped']
