import pandas as pd
import numpy as np
import uuid
from datetime import datetime, timezone, timedelta

def generate_mock_jobs(num_jobs=200, num_floors=12, expedited_share=0.15, output_file="mock_jobs_generated.csv"):
    """
    Generates a dataset of delivery jobs for exercising the tiered dispatcher.
    Most jobs are light enough for a single carrier; a tail of heavy jobs
    lands in the PAIR and TRIPLE tiers so team formation gets exercised too.
    """
    data = []
    now = datetime.now(timezone.utc)

    for job_index in range(num_jobs):
        # 80% light (SINGLE), 12% PAIR, 8% TRIPLE under the default thresholds
        band = np.random.choice(["single", "pair", "triple"], p=[0.8, 0.12, 0.08])
        if band == "single":
            weight = np.random.uniform(50, 2000)
        elif band == "pair":
            weight = np.random.uniform(2001, 2600)
        else:
            weight = np.random.uniform(2601, 3000)

        expedited = np.random.random() < expedited_share

        data.append({
            "job_id": f"j_{str(job_index+1).zfill(6)}_{str(uuid.uuid4())[:4]}",
            "created_at": (now - timedelta(minutes=np.random.randint(0, 60))).isoformat(),
            # arrival tick: jobs trickle in over the run instead of all at once
            "arrival_tick": int(np.random.randint(0, max(1, num_jobs // 4))),
            "weight": int(np.round(weight)),
            "destination": int(np.random.randint(1, num_floors + 1)),
            "priority_level": int(np.random.choice([10, 100])) if expedited else "",
        })

    df = pd.DataFrame(data).sort_values("arrival_tick", kind="stable")
    df.to_csv(output_file, index=False)
    print(f"Generated {num_jobs} jobs and saved to '{output_file}'")

    print("\nJobs per weight band:")
    bands = pd.cut(df["weight"], bins=[0, 2000, 2600, 3000], labels=["SINGLE", "PAIR", "TRIPLE"])
    for name, count in bands.value_counts().sort_index().items():
        print(f"  {name}: {count} jobs")

if __name__ == "__main__":
    generate_mock_jobs()
