"""Engine — activity contracts and outcome classification."""
