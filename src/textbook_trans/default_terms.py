# English -> Urdu robotics vocabulary shipped with the textbook.
DEFAULT_TERMS: list[dict] = [
    {"source_term": "physical ai", "target_term": "فزکل ای آئی",
     "definition": "A form of artificial intelligence that is embodied in physical systems",
     "context": "Robotics and AI integration"},
    {"source_term": "humanoid robot", "target_term": "ہیومنوائڈ روبوٹ",
     "definition": "A robot with a human-like body plan and capabilities",
     "context": "Robotics engineering"},
    {"source_term": "reinforcement learning", "target_term": "رینفورسمنٹ لرننگ",
     "definition": "Learning a behaviour policy from rewards gathered through trial and error",
     "context": "Machine learning"},
    {"source_term": "sensor", "target_term": "سینسر",
     "definition": "A device that measures a physical quantity and reports it to the robot",
     "context": "Perception hardware"},
    {"source_term": "actuator", "target_term": "ایکچوایٹر",
     "definition": "A component that converts energy into motion",
     "context": "Robot hardware"},
    {"source_term": "embodiment", "target_term": "ایمبوڈیمنٹ",
     "definition": "The concept that intelligence emerges from the interaction between an agent and its physical environment",
     "context": "Cognitive robotics"},
    {"source_term": "control system", "target_term": "کنٹرول سسٹم",
     "definition": "A system that manages the behaviour of other devices through feedback or commands",
     "context": "Control engineering"},
    {"source_term": "feedback theory", "target_term": "فیڈ بیک تھیوری",
     "definition": "The study of systems whose outputs are routed back as inputs",
     "context": "Control engineering"},
    {"source_term": "sim-to-real transfer", "target_term": "سیم ٹو ریل ٹرانسفر",
     "definition": "Carrying a policy trained in simulation over to a physical robot",
     "context": "Robot learning"},
    {"source_term": "multimodal perception", "target_term": "ملٹی موڈل پرچیپشن",
     "definition": "Combining several sensing modalities such as vision, touch and sound",
     "context": "Perception"},
    {"source_term": "world model", "target_term": "ورلڈ ماڈل",
     "definition": "An internal model an agent uses to predict how its environment evolves",
     "context": "Cognitive robotics"},
    {"source_term": "cognitive robotics", "target_term": "کاگنیٹو روبوٹکس",
     "definition": "Robotics concerned with giving robots reasoning and learning abilities",
     "context": "Robotics research"},
    {"source_term": "ros2", "target_term": "آر او ایس 2",
     "definition": "The second generation of the Robot Operating System middleware",
     "context": "Robotics software"},
    {"source_term": "real-time control", "target_term": "ریل ٹائم کنٹرول",
     "definition": "Control whose correctness depends on meeting timing deadlines",
     "context": "Control engineering"},
    {"source_term": "bipedal locomotion", "target_term": "بائی پیڈل لوکوموشن",
     "definition": "Walking on two legs",
     "context": "Humanoid robotics"},
    {"source_term": "dexterous manipulation", "target_term": "ڈیکسٹیرس مینیپولیشن",
     "definition": "Skilful handling of objects with multi-fingered hands",
     "context": "Robot manipulation"},
    {"source_term": "human-robot interaction", "target_term": "ہیومن روبوٹ انٹرایکشن",
     "definition": "The study of how people and robots communicate and cooperate",
     "context": "Social robotics"},
    {"source_term": "ethical robotics", "target_term": "اثیکل روبوٹکس",
     "definition": "The study of moral questions raised by designing and deploying robots",
     "context": "Robot ethics"},
    {"source_term": "agentic robotics", "target_term": "ایجنٹک روبوٹکس",
     "definition": "Robots that set and pursue goals autonomously",
     "context": "Robotics research"},
    {"source_term": "tool-using robots", "target_term": "ٹول یوزنگ روبوٹس",
     "definition": "Robots able to use external tools to extend their capabilities",
     "context": "Robot manipulation"},
    {"source_term": "multi-agent coordination", "target_term": "ملٹی ایجنٹ کوآرڈینیشن",
     "definition": "Organising several agents so that they reach a shared objective",
     "context": "Multi-robot systems"},
    {"source_term": "reasoning engine", "target_term": "ریزننگ انجن",
     "definition": "A component that derives conclusions from facts and rules",
     "context": "Artificial intelligence"},
]
