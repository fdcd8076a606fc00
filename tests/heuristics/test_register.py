from __future__ import annotations

import math
import threading

from roomsearch.optimization.heuristics import BestSolutionRegister


def test_initial_state_is_empty():
    register = BestSolutionRegister()
    snap = register.snapshot()
    assert math.isinf(snap.fitness)
    assert snap.assignment is None
    assert not snap.found
    assert register.improvements == []


def test_try_improve_accepts_strictly_better():
    register = BestSolutionRegister()
    assert register.try_improve(20, [0, 1])
    assert register.try_improve(10, [1, 1])
    snap = register.snapshot()
    assert snap.fitness == 10
    assert snap.assignment == (1, 1)


def test_ties_do_not_replace():
    register = BestSolutionRegister()
    assert register.try_improve(5, [0, 0])
    assert not register.try_improve(5, [1, 1])
    assert register.snapshot().assignment == (0, 0)


def test_worse_candidate_leaves_state_unchanged():
    register = BestSolutionRegister()
    register.try_improve(5, [0, 0], worker_id=0, iteration=3)
    assert not register.try_improve(7, [1, 0])
    snap = register.snapshot()
    assert (snap.fitness, snap.assignment) == (5, (0, 0))
    assert len(register.improvements) == 1


def test_assignment_is_copied():
    register = BestSolutionRegister()
    buffer = [0, 1, 2]
    register.try_improve(3, buffer)
    buffer[0] = 2
    assert register.snapshot().assignment == (0, 1, 2)


def test_improvement_history_is_monotone():
    register = BestSolutionRegister()
    for fitness in [30, 40, 20, 20, 25, 5, 10, 0]:
        register.try_improve(fitness, [fitness], worker_id=1)
    history = [entry.fitness for entry in register.improvements]
    assert history == [30, 20, 5, 0]
    assert all(entry.worker_id == 1 for entry in register.improvements)


def test_concurrent_updates_keep_pairs_consistent():
    register = BestSolutionRegister()
    barrier = threading.Barrier(8)

    def _offer(worker_id: int) -> None:
        barrier.wait()
        for fitness in range(500, -1, -1):
            # the assignment encodes its own fitness so mismatched writes are detectable
            register.try_improve(fitness, [fitness, worker_id], worker_id=worker_id)

    threads = [threading.Thread(target=_offer, args=(k,)) for k in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snap = register.snapshot()
    assert snap.fitness == 0
    assert snap.assignment is not None
    assert snap.assignment[0] == 0
    history = [entry.fitness for entry in register.improvements]
    assert history == sorted(history, reverse=True)
    assert len(history) == len(set(history))
