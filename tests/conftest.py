pytest_plugins = ["mergebot.testing.conftest"]
