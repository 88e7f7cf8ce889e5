import argparse

import numpy as np

from src.gcounter import (
    BoundedIntegerNumeric,
    FloatNumeric,
    GCounter,
    IntegerNumeric,
    OverflowPolicy,
    merge_all,
)


def build_numeric(kind='int', dtype='int64', overflow='saturate'):
    if kind == 'int':
        return IntegerNumeric()
    if kind == 'float':
        return FloatNumeric()
    if kind == 'bounded':
        return BoundedIntegerNumeric(dtype=dtype, overflow=OverflowPolicy(overflow))
    raise ValueError(f"Unknown numeric kind: {kind}")


def run_simulation(n_replicas=3, rounds=5, max_delta=10, duplicate_rate=0.3,
                   delay_rate=0.3, seed=42, numeric=None):
    """
    Simulate replicas gossiping G-Counter states over an unreliable network.

    Every round each replica increments its own entry and broadcasts its
    state. Messages are delivered shuffled, some are duplicated and some
    are held back to the next round. All pending messages are delivered
    after the last round.

    Returns:
        Tuple of (dict of replica id -> final state, list of every state
        ever broadcast)
    """
    rng = np.random.default_rng(seed)
    numeric = numeric if numeric is not None else IntegerNumeric()

    replica_ids = [f"replica-{i}" for i in range(n_replicas)]
    states = {replica_id: GCounter.empty(numeric) for replica_id in replica_ids}
    broadcast = []
    in_flight = []

    def deliver(messages):
        order = rng.permutation(len(messages))
        for index in order:
            target, state = messages[index]
            states[target] = states[target].merge(state)

    for _ in range(rounds):
        for replica_id in replica_ids:
            delta = numeric.coerce(int(rng.integers(0, max_delta + 1)))
            states[replica_id] = states[replica_id].increment(replica_id, delta)
            broadcast.append(states[replica_id])
            for peer in replica_ids:
                if peer == replica_id:
                    continue
                in_flight.append((peer, states[replica_id]))
                if rng.random() < duplicate_rate:
                    in_flight.append((peer, states[replica_id]))

        delayed = rng.random(len(in_flight)) < delay_rate
        deliver([message for message, held in zip(in_flight, delayed) if not held])
        in_flight = [message for message, held in zip(in_flight, delayed) if held]

    deliver(in_flight)
    return states, broadcast


def main():
    parser = argparse.ArgumentParser(description="G-Counter convergence demo")
    parser.add_argument("--replicas", type=int, default=3, help="Number of replicas")
    parser.add_argument("--rounds", type=int, default=5, help="Number of gossip rounds")
    parser.add_argument("--max-delta", type=int, default=10, help="Largest increment per round")
    parser.add_argument("--duplicate-rate", type=float, default=0.3,
                        help="Probability that a message is delivered twice")
    parser.add_argument("--delay-rate", type=float, default=0.3,
                        help="Probability that a message is held back one round")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--numeric", choices=['int', 'float', 'bounded'], default='int',
                        help="Count type")
    parser.add_argument("--dtype", default='int64', help="numpy dtype for --numeric bounded")
    parser.add_argument("--overflow", choices=[p.value for p in OverflowPolicy],
                        default='saturate', help="Overflow policy for --numeric bounded")
    args = parser.parse_args()

    numeric = build_numeric(args.numeric, args.dtype, args.overflow)

    print("=" * 60)
    print("G-COUNTER CONVERGENCE DEMO")
    print("=" * 60)
    print(f"Replicas: {args.replicas}, rounds: {args.rounds}, numeric: {numeric!r}")

    states, broadcast = run_simulation(
        n_replicas=args.replicas,
        rounds=args.rounds,
        max_delta=args.max_delta,
        duplicate_rate=args.duplicate_rate,
        delay_rate=args.delay_rate,
        seed=args.seed,
        numeric=numeric,
    )
    expected = merge_all(broadcast, numeric)

    print("\nFinal states:")
    for replica_id, state in states.items():
        print(f"  {replica_id}: value={state.value()} counts={dict(state.counts)}")

    converged = all(state == expected for state in states.values())
    print(f"\nExpected value: {expected.value()}")
    print("All replicas converged!" if converged else "Replicas diverged!")


if __name__ == "__main__":
    main()
