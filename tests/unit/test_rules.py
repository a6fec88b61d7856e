from flowtrim.optimizer.rules import (
    functional_category,
    input_pattern,
    is_deterministic_operation,
    operation_pattern,
    primary_function,
)


def test_operation_pattern_masks_numbers():
    assert operation_pattern("Process item 12") == "process item N"


def test_operation_pattern_replaces_digits_before_item_tokens():
    # digits are already masked, so the ITEM rule never sees them
    assert operation_pattern("Fetch user_42") == "fetch user_N"


def test_operation_pattern_masks_email():
    assert operation_pattern("Email bob@example.com") == "email EMAIL"


def test_input_pattern_classifies_names_case_sensitively():
    assert input_pattern(["userId", "fields"]) == "ID-PARAM"
    assert input_pattern(["payloadData", "appConfig"]) == "CONFIG-DATA"
    assert input_pattern(["DATA"]) == "PARAM"
    assert input_pattern([]) == ""


def test_functional_category():
    assert functional_category("Validate input") == "validation"
    assert functional_category("Render the page") == "formatting"
    assert functional_category("Say hello") is None


def test_is_deterministic_operation():
    assert is_deterministic_operation("Query DB for orders")
    assert is_deterministic_operation("Analyze sentiment")
    assert not is_deterministic_operation("Generate a poem")


def test_primary_function_picks_most_frequent_bucket():
    descriptions = ["Fetch users", "Get orders", "Validate order"]
    assert primary_function(descriptions) == "Data Retrieval"


def test_primary_function_defaults_to_general():
    assert primary_function(["Say hello"]) == "General"
    assert primary_function([]) == "General"
