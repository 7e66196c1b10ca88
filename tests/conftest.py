import os
import tempfile

# veriweb.config reads the environment at import time
_tmpdir = tempfile.mkdtemp(prefix="veriweb-tests-")
os.environ["VERIWEB_DB"] = os.path.join(_tmpdir, "veriweb-test.db")
os.environ["VERIWEB_RATELIMIT_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)
os.environ.pop("VERIWEB_RULESET", None)
