"""Launch the Harmony Glide window."""

from harmony_glide.ui.main import main


if __name__ == "__main__":
    main()
