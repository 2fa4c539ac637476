from human_json._human_json import main

main()
