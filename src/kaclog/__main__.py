from kaclog.application import main


def _entry_main() -> None:
    main()


if __name__ == "__main__":
    _entry_main()
