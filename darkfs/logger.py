import logging, sys

def setup_logging(level = logging.INFO, stream = None):
	root_logger = logging.getLogger()
	root_logger.setLevel(level)

	# Avoid stacking handlers when called twice (tests, serve after CLI setup)
	for handler in list(root_logger.handlers):
		if getattr(handler, "_darkfs", False):
			root_logger.removeHandler(handler)

	handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
	handler._darkfs = True

	formatter = logging.Formatter(
		"[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
		datefmt="%H:%M:%S"
	)
	handler.setFormatter(formatter)
	root_logger.addHandler(handler)
