"""Launch Drift Bird in a pygame window."""

from drift_bird.game import main

if __name__ == "__main__":
    main()
