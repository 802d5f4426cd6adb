import logging

from plot_digitizer.settings import load_settings
from plot_digitizer.ui_window import DigitizerWindow


def main():
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = DigitizerWindow(settings=settings)
    app.mainloop()


if __name__ == "__main__":
    main()
