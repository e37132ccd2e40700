import argparse
import csv
import logging
import os
from collections import defaultdict
from typing import Dict, List

from carriers.models import CarrierStatus, SimCarrier
from dispatch.dispatcher import Dispatcher
from dispatch.policy import DispatchPolicy
from jobs.models import Job
from jobs.policy import tier_policy_from_env
from jobs.pool import JobPool, UnroutableJobError

def load_jobs(filepath="mock_jobs_generated.csv") -> Dict[int, List[Job]]:
    """
    Jobs grouped by the tick at which they arrive.
    """
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    absolute_path = os.path.join(base_dir, filepath)

    arrivals: Dict[int, List[Job]] = defaultdict(list)
    with open(absolute_path, 'r') as file:
        reader = csv.DictReader(file)
        for row in reader:
            priority = row.get('priority_level') or None
            arrivals[int(row['arrival_tick'])].append(
                Job(
                    job_id=row['job_id'],
                    weight=float(row['weight']),
                    destination=int(row['destination']),
                    priority_level=int(priority) if priority is not None else None,
                )
            )
    return arrivals

def run_simulation(jobs_file: str, fleet_size: int, trip_ticks: int, max_ticks: int):
    print("=== STARTING TIERED DISPATCH SIMULATION ===")

    # 1. Load Data
    arrivals = load_jobs(jobs_file)
    total_jobs = sum(len(batch) for batch in arrivals.values())
    carriers = [SimCarrier(id=f"CAR-{str(i+1).zfill(2)}") for i in range(fleet_size)]
    print(f"Loaded {total_jobs} Jobs and {len(carriers)} Carriers.\n")

    # 2. Configure System
    dispatcher = Dispatcher(
        pool=JobPool(policy=tier_policy_from_env()),
        policy=DispatchPolicy(fleet_size=fleet_size),
    )
    for carrier in carriers:
        dispatcher.register_waiting(carrier)

    # Ticks remaining before each dispatched carrier is back at base
    returning: Dict[str, int] = {}

    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    output_path = os.path.join(base_dir, "dispatch_results.csv")

    delivered = 0
    rejected = 0
    tick = 0
    with open(output_path, "w", newline='') as file:
        writer = csv.writer(file)
        writer.writerow(["tick", "tier", "job_ids", "carrier_ids", "team"])

        for tick in range(max_ticks):
            # 3. Bring back carriers whose trip is over
            for carrier in carriers:
                if carrier.status != CarrierStatus.DISPATCHED:
                    continue
                returning[carrier.id] -= 1
                if returning[carrier.id] <= 0:
                    delivered += len(carrier.complete_delivery())
                    dispatcher.register_waiting(carrier)

            # 4. New arrivals
            for job in arrivals.get(tick, []):
                try:
                    dispatcher.enqueue(job)
                except UnroutableJobError as error:
                    rejected += 1
                    print(f"[REJECTED] {error}")

            # 5. One scheduling pass
            result = dispatcher.step()
            for assignment in result.assignments:
                for carrier in assignment.carriers:
                    returning[carrier.id] = trip_ticks
                writer.writerow([
                    tick,
                    assignment.tier.name,
                    " ".join(job.job_id for job in assignment.jobs),
                    " ".join(carrier.id for carrier in assignment.carriers),
                    assignment.team,
                ])

            if not result.ok:
                job = result.capacity_error.job
                print(f"[DROPPED] {result.capacity_error}")
                dispatcher.pool.withdraw(job.job_id)
                rejected += 1

            if tick > max(arrivals, default=0) and dispatcher.pool.is_empty() \
                    and len(dispatcher.waiting_line) == len(carriers):
                break

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Ticks run: {tick + 1}")
    print(f"Job deliveries completed: {delivered} (team jobs count once per carrier)")
    print(f"Jobs rejected: {rejected} / {total_jobs}")
    stats = dispatcher.pool.stats()
    print(f"Still pending: {stats.total} (SINGLE {stats.single_count}, PAIR {stats.pair_count}, TRIPLE {stats.triple_count})")
    print(f"Results written to '{output_path}'.")

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the tiered dispatcher against a mock job file.")
    parser.add_argument("--jobs", default="mock_jobs_generated.csv")
    parser.add_argument("--fleet-size", type=int, default=5)
    parser.add_argument("--trip-ticks", type=int, default=6)
    parser.add_argument("--max-ticks", type=int, default=500)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    run_simulation(args.jobs, args.fleet_size, args.trip_ticks, args.max_ticks)
