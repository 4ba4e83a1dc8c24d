"""TrainAI workout plan synthesis pipeline."""
