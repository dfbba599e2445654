"""framelog Example: Logging a 6-DOF arm rollout

Declares a scalar, a vector and a matrix stream up front, logs a
simulated 200-step reaching motion, then reads the file back with h5py.

Run:
    python examples/arm_telemetry.py

Output:
    - Creates arm_telemetry.h5 with groups /arm and /arm/ee
"""

import logging

import h5py
import numpy as np

from framelog import open_log

NUM_STEPS = 200


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    rng = np.random.default_rng(0)

    joint_pos = np.zeros(6)
    with open_log("arm_telemetry.h5", metadata={"robot": "custom_6dof_arm"}) as log:
        log.register("/arm/joint_pos", joint_pos, NUM_STEPS)
        log.register("/arm/ee/pose", np.eye(4), NUM_STEPS)
        log.register("/reward", 0.0, NUM_STEPS)

        for step in range(NUM_STEPS):
            joint_pos = joint_pos + rng.normal(0, 0.02, 6)

            # Planar stand-in for forward kinematics
            pose = np.eye(4)
            pose[:3, 3] = [np.cos(joint_pos[0]), np.sin(joint_pos[0]), joint_pos[1]]

            log.append("joint_pos", joint_pos)
            log.append("pose", pose)
            log.append("reward", -float(np.linalg.norm(pose[:3, 3] - [0.5, 0.3, 0.4])))

    with h5py.File("arm_telemetry.h5", "r") as f:
        print(f"joint_pos: {f['arm/joint_pos'].shape}")   # (6, 200)
        print(f"pose:      {f['arm/ee/pose'].shape}")     # (4, 4, 200)
        print(f"reward:    {f['reward'].shape}")          # (200,)
        print(f"final reward: {f['reward'][-1]:.3f}")


if __name__ == "__main__":
    main()
