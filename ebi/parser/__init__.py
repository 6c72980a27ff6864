"""Language detection, shebang parsing, component extraction and classification."""