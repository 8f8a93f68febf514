"""Release pipeline: version resolution, build orchestration and publishing."""
