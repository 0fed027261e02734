pytest_plugins = ["mercury_qa.plugin", "pytester"]
