"""Review-request pipeline: GitHub PR in, CriticWave findings comment out."""
