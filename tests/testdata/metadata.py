from os.path import join, split

path_to_testdata = split(__file__)[0]

path_to_config = join(path_to_testdata, "config/config.yml")
path_to_json_config = join(path_to_testdata, "config/config.json")
path_to_invalid_config = join(path_to_testdata, "config/invalid_config.yml")
path_to_events = join(path_to_testdata, "config/events.jsonl")
