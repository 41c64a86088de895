"""Launch the Streamlit app: ``python -m pendel3d``."""
import sys
from pathlib import Path

from streamlit.web import cli as stcli


def main() -> None:
    app = Path(__file__).with_name("app_streamlit.py")
    sys.argv = ["streamlit", "run", str(app)] + sys.argv[1:]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
